from __future__ import annotations

from collections import Counter
from typing import Optional

from .results import TextFeatures
from .scoring import FrequencyMetric
from .utils import index_of_coincidence_az, normalize_az, shannon_entropy


def analyze_text(text: str, reference: Optional[str] = None) -> dict:
    """
    Returns a dict of features used for:
      - deciding whether a cipher plugin is worth trying
      - eyeballing how close a decryption is to the reference text
    """
    az = normalize_az(text)
    counts = Counter(az)

    distance = None
    if reference is not None and az:
        distance = FrequencyMetric(reference)(az)

    feats = TextFeatures(
        length=len(text),
        letters=len(az),
        unique_letters=len(counts),
        ioc=index_of_coincidence_az(az),
        entropy=shannon_entropy(az),
        most_common="".join(ch for ch, _ in counts.most_common(5)),
        reference_distance=distance,
    )
    return feats.to_dict()


def alpha_ratio(text: str) -> float:
    stripped = "".join(text.split())
    if not stripped:
        return 0.0
    return len(normalize_az(stripped)) / len(stripped)
