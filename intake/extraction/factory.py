import random
from typing import Optional

from intake.config import Settings, settings
from intake.extraction.base import ExtractionResultProvider
from intake.extraction.demo_corpus import DemoCorpusProvider


def get_provider(
    name: Optional[str] = None,
    config: Optional[Settings] = None,
) -> ExtractionResultProvider:
    config = config or settings
    selected = (name or config.extraction_provider).strip().lower()
    if selected == "demo":
        return DemoCorpusProvider(rng=random.Random(config.random_seed))
    raise ValueError(f"unsupported extraction provider: {selected}")
