from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Union
import logging

from ..exceptions import PipelineStateError
from ..repositories.image_repository import ImageRepository
from .stages import ImageStream, Stage

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Ordered list of stages, built once and executed once.

        Pipeline().add(True, scale_to(256)) \\
                  .add(not bake_bg, add_background(bg)) \\
                  .execute(source, build_dir)

    Stages run in the order they were added; add(False, ...) is the same as
    not calling add at all.  After execute() the pipeline is spent and any
    further add()/execute() raises PipelineStateError.
    """

    def __init__(self, image_repository: ImageRepository = None):
        self.image_repository = image_repository or ImageRepository()
        self._stages: List[Stage] = []
        self._executed = False

    @property
    def stages(self) -> List[Stage]:
        return list(self._stages)

    @property
    def executed(self) -> bool:
        return self._executed

    def _ensure_building(self) -> None:
        if self._executed:
            raise PipelineStateError("Pipeline has already been executed; build a new one")

    def add(self, enabled: bool, stage: Stage) -> "Pipeline":
        self._ensure_building()
        if enabled:
            self._stages.append(stage)
        return self

    def run(self, source: Iterable) -> ImageStream:
        """Fold *source* through every stage. Lazy: nothing is pulled yet."""
        stream = iter(source)
        for stage in self._stages:
            stream = stage(stream)
        return stream

    def execute(self, source: Iterable, dest_dir: Union[str, Path]) -> List[Path]:
        """
        Run the stages over *source* and write every resulting image to
        dest_dir/name, in order.  Returns the written paths.
        A failed write aborts the remaining writes of this pipeline.
        """
        self._ensure_building()
        self._executed = True

        dest_dir = Path(dest_dir)
        written = []
        for image in self.run(source):
            written.append(self.image_repository.save(image, dest_dir))

        logger.info(f"Wrote {len(written)} image(s) to {dest_dir}")
        return written


def create_pipeline(image_repository: ImageRepository = None) -> Pipeline:
    return Pipeline(image_repository)
