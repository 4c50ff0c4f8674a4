"""Fixed-corpus extraction provider used in place of a real OCR backend."""

import random
from typing import Optional, Sequence

from intake.extraction.base import ExtractionResultProvider
from intake.jobs.errors import ExtractionProviderError

DEMO_EXTRACTED_TEXTS = (
    "Patient History: 45-year-old male with type 2 diabetes, hypertension. "
    "Current medications: Metformin 1000mg BID, Lisinopril 10mg daily.",
    "Lab Results: HbA1c: 7.2%, Fasting glucose: 126 mg/dL, Creatinine: 1.1 mg/dL, "
    "eGFR: 78 mL/min/1.73m²",
    "Imaging Report: Chest X-ray shows no acute cardiopulmonary abnormality. "
    "Heart size normal. Lungs are clear.",
    "Referral Letter: Patient referred for specialist consultation regarding "
    "persistent symptoms despite initial treatment.",
)


class DemoCorpusProvider(ExtractionResultProvider):
    """Returns one text picked at random from a fixed corpus."""

    def __init__(
        self,
        corpus: Sequence[str] = DEMO_EXTRACTED_TEXTS,
        rng: Optional[random.Random] = None,
    ):
        self._corpus = tuple(corpus)
        self._rng = rng or random.Random()

    async def extract(self, job_id: str) -> str:
        if not self._corpus:
            raise ExtractionProviderError("Demo corpus is empty")
        return self._rng.choice(self._corpus)
