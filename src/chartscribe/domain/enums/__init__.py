from .workflow import CdiStatus, PipelineState, ReviewStatus

__all__ = ["PipelineState", "CdiStatus", "ReviewStatus"]
