"""Batch photo quality orchestrator with logging support."""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from .config import Config
from .errors import DegenerateInputError
from .report import export_csv, export_json, summarize
from .types import DecodedImage, ImageRecord
from ..processors.quality.duplicates import DuplicateDetector, compute_dhash
from ..processors.quality.exposure import analyze_exposure
from ..processors.quality.flags import FlagClassifier
from ..processors.quality.sharpness import SharpnessAnalyzer
from ..utils.image_utils import decode_image, get_image_paths
from ..utils.time_utils import format_duration

logger = logging.getLogger(__name__)

EXPORTERS = {"csv": export_csv, "json": export_json}


class PhotoProcessor:
    """Runs per-image analysis, then the batch-wide duplicate pass."""

    def __init__(self, config: Optional[Config] = None, logger: Optional[callable] = None):
        self.config = config or Config.from_env()

        # Initialize processors
        self.sharpness_analyzer = SharpnessAnalyzer(self.config)
        self.duplicate_detector = DuplicateDetector(self.config)
        self.flag_classifier = FlagClassifier(self.config)

        # Logger callback (accepts str)
        self.logger = logger or print

    def log(self, message: str):
        """Send a progress message to the console or the caller's logger."""
        self.logger(message)

    def analyze_decoded(self, image: DecodedImage) -> ImageRecord:
        """Per-image pipeline: sharpness, exposure, hash and flags."""
        if image.width <= 0 or image.height <= 0:
            raise DegenerateInputError(f"{image.name} has no pixels ({image.width}x{image.height})")

        blur_variance, blur_score = self.sharpness_analyzer.analyze(image.analysis)
        exposure = analyze_exposure(image.analysis)
        hash_hex = compute_dhash(image.hash_grid)

        megapixels = (image.width * image.height) / 1_000_000
        flags = self.flag_classifier.classify(
            blur_score, image.width, image.height, megapixels, exposure
        )

        return ImageRecord(
            name=image.name,
            size_bytes=image.size_bytes,
            width=image.width,
            height=image.height,
            aspect_ratio=image.width / image.height,
            megapixels=megapixels,
            blur_variance=blur_variance,
            blur_score=blur_score,
            exposure=exposure,
            hash_hex=hash_hex,
            flags=flags,
            metadata=image.metadata,
        )

    def analyze_file(self, image_path: str) -> ImageRecord:
        """Decode and analyze one image file. Raises DecodeError if unreadable."""
        return self.analyze_decoded(decode_image(image_path, self.config))

    def analyze_images(self, images: Sequence[DecodedImage]) -> List[ImageRecord]:
        """Analyze already-decoded images, then flag near-duplicates."""
        records = [self.analyze_decoded(image) for image in images]
        return self.duplicate_detector.mark_duplicates(records)

    def analyze_paths(self, image_paths: Sequence[str]) -> List[ImageRecord]:
        """
        Analyze image files in order, then flag near-duplicates.

        Any per-image failure aborts the whole batch; no partial result
        is returned.
        """
        records = self._analyze_each(image_paths)
        self.log("🔗 Detecting duplicates...")
        return self.duplicate_detector.mark_duplicates(records)

    def _analyze_each(self, image_paths: Sequence[str]) -> List[ImageRecord]:
        processing = self.config.processing
        if not processing.use_parallel_processing or len(image_paths) < 2:
            records = []
            for i, path in enumerate(image_paths, 1):
                self.log(f"  Analyzing {i}/{len(image_paths)}: {os.path.basename(path)}")
                records.append(self.analyze_file(path))
            return records

        self.log(
            f"🚀 Analyzing {len(image_paths)} photos with {processing.max_worker_threads} threads..."
        )
        with ThreadPoolExecutor(max_workers=processing.max_worker_threads) as executor:
            futures = [executor.submit(self.analyze_file, path) for path in image_paths]
            try:
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    def process_directory(
        self,
        input_dir: Optional[str] = None,
        output_path: Optional[str] = None,
        fmt: str = "csv",
        recursive: bool = False,
    ) -> Dict:
        """Analyze every image in a directory and write the report."""
        input_dir = input_dir or self.config.input_dir

        if not os.path.isdir(input_dir):
            self.log(f"❌ Input directory does not exist: {input_dir}")
            return {"success": False, "error": f"Input directory does not exist: {input_dir}"}

        if fmt not in EXPORTERS:
            return {"success": False, "error": f"Unsupported report format: {fmt}"}

        self.log(f"📁 Analyzing photos from: {input_dir}")
        image_paths = get_image_paths(input_dir, recursive=recursive)
        if not image_paths:
            self.log("⚠️ No images found in input directory")
            return {"success": False, "error": "No images found in input directory"}

        self.log(f"📸 Found {len(image_paths)} images")
        started = time.monotonic()
        records = self.analyze_paths(image_paths)
        elapsed = time.monotonic() - started

        if output_path is None:
            self.config.create_directories()
            output_path = os.path.join(self.config.output_dir, self._report_name(fmt))
        else:
            parent = os.path.dirname(output_path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        with open(output_path, "w", encoding="utf-8", newline="") as fh:
            fh.write(EXPORTERS[fmt](records))

        summary = summarize(records)
        self.log(f"✅ Analyzed {len(records)} images in {format_duration(elapsed)}")
        self.log(f"📄 Report written to: {output_path}")
        logger.info(f"Batch summary: {summary}")

        return {
            "success": True,
            "input_dir": input_dir,
            "total_images": len(records),
            "summary": summary,
            "report_path": output_path,
            "records": records,
        }

    def _report_name(self, fmt: str) -> str:
        stem, _ = os.path.splitext(self.config.report_name)
        return f"{stem}.{fmt}"
