"""Conversion result data model."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class Fidelity(Enum):
    """How faithfully a transcoding pass reproduced its input.

    EXACT: every element that needed the side channel carried a decodable one
    HEURISTIC: at least one element was rebuilt from the mapping table
    FALLBACK: the transcoder failed and returned its input unchanged
    """

    EXACT = "exact"
    HEURISTIC = "heuristic"
    FALLBACK = "fallback"


@dataclass
class ConversionResult:
    """Result of an XML to markup (or markup to XML) conversion.

    Contains the converted content along with the fidelity level reached
    and warnings about elements that had to be reconstructed heuristically.

    Attributes:
        content: Converted content
        fidelity: Degradation level reached by the conversion
        warnings: List of warnings about lossy reconstructions
    """
    content: str
    fidelity: Fidelity = Fidelity.EXACT
    warnings: List[str] = field(default_factory=list)

    def downgrade(self, warning: str) -> None:
        """Record a heuristic reconstruction, never upgrading FALLBACK."""
        self.warnings.append(warning)
        if self.fidelity == Fidelity.EXACT:
            self.fidelity = Fidelity.HEURISTIC
