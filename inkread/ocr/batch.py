"""
Batch recognition of independent images.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any

from inkread.models import RecognitionResult

logger = logging.getLogger(__name__)


class BatchRecognizer:
    """Recognize many images concurrently, returning texts in input order.

    All-or-nothing: the first failure to complete aborts the batch and is
    re-raised; no partial results are returned.

    Usage:
        batch = BatchRecognizer(recognizer.recognize, max_workers=4)
        texts = batch.recognize([page1, page2, page3])
    """

    def __init__(
        self,
        recognize: Callable[[Any], RecognitionResult],
        max_workers: int = 4,
    ):
        self._recognize = recognize
        self.max_workers = max_workers

    def recognize(self, images: Sequence[Any]) -> list[str]:
        """
        Recognize each image and return its full text.

        Args:
            images: Images to recognize.

        Returns:
            One text per image, in the same order as images.

        Raises:
            The first error raised by any image's recognition.
        """
        if not images:
            return []

        texts: list[str] = [""] * len(images)
        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(images)))
        try:
            futures = {executor.submit(self._recognize, image): i for i, image in enumerate(images)}

            for future in as_completed(futures):
                error = future.exception()
                if error is not None:
                    logger.debug(
                        "Batch of %d aborted at image %d: %s", len(images), futures[future], error
                    )
                    raise error
                texts[futures[future]] = future.result().full_text
        finally:
            # Queued work is dropped; running calls finish in the background
            executor.shutdown(wait=False, cancel_futures=True)

        return texts
