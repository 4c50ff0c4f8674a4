class IntakeError(Exception):
    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class NotFoundError(IntakeError):
    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__("job_not_found", f"Job '{job_id}' not found")


class InvalidStateError(IntakeError):
    def __init__(self, job_id: str, status: str, expected: str) -> None:
        self.job_id = job_id
        self.status = status
        super().__init__(
            "invalid_state",
            f"Job '{job_id}' is {status}; expected {expected}",
        )


class ExtractionProviderError(IntakeError):
    def __init__(self, message: str) -> None:
        super().__init__("extraction_failed", message)
