"""
CDI improvement service interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from ....domain.entities.patient import PatientInfo
from ....domain.services.cdi_contract import CdiImprovement


class CdiService(ABC):
    """Requests an improved version of a saved chart."""

    @abstractmethod
    async def improve(
        self,
        original: Mapping[str, Any],
        patient_info: Optional[PatientInfo] = None,
    ) -> CdiImprovement:
        """
        Run the CDI improvement pass.

        Args:
            original: The ten chart fields keyed by storage name (None allowed)
            patient_info: Optional age/gender used only for phrasing

        Returns:
            CdiImprovement with the untouched original, improved fields and notes

        Raises:
            ImprovementServiceError: completion service unreachable or failed
            ImprovementParseError: response was not the expected JSON object
        """
        pass
