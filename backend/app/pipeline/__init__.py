from app.pipeline.ingest import SessionIngestor
from app.pipeline.stages import Stage, run_stage

__all__ = ["SessionIngestor", "Stage", "run_stage"]
