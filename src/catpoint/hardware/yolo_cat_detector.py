"""
YOLO cat detector

Uses a pretrained COCO model (which includes the ``cat`` class) through
ultralytics. Threshold is given in percent by the controller and converted to
the model's 0-1 confidence.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

import cv2
import numpy as np

from .cat_detector import CatDetector

# Ultralytics YOLO
try:
    from ultralytics import YOLO
    HAS_YOLO = True
except ImportError:
    HAS_YOLO = False

logger = logging.getLogger(__name__)

CAT_CLASS_NAME = "cat"


@dataclass
class Detection:
    """Single detection result."""
    class_id: int
    class_name: str
    confidence: float
    bbox: Tuple[int, int, int, int]  # (x, y, w, h)


class YOLOCatDetector(CatDetector):
    """
    YOLO based CatDetector.

    - Only the COCO "cat" class is requested from the model
    - Accepts an ndarray frame or a path to an image file
    """

    def __init__(
        self,
        model_name: str = "yolo11n.pt",
        device: str = "cpu",
    ):
        """
        Args:
            model_name: YOLO weights name or path
            device: 'cpu' or 'cuda'
        """
        if not HAS_YOLO:
            raise RuntimeError("ultralytics not installed. Install: pip install catpoint[vision]")

        self.model_name = model_name
        self.device = device

        logger.info("Loading YOLO model %s on %s", model_name, device)
        self.model = YOLO(model_name)
        if device == "cuda":
            self.model.to("cuda")

        self.class_names: Dict[int, str] = self.model.names
        self.cat_class_ids = [
            class_id for class_id, name in self.class_names.items()
            if name == CAT_CLASS_NAME
        ]
        if not self.cat_class_ids:
            raise ValueError(f"Model {model_name} has no '{CAT_CLASS_NAME}' class")

        # Stats
        self.frame_count = 0
        self.detection_count = 0
        self.total_inference_time = 0.0

    def contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        detections = self.detect(image, confidence_threshold)
        return len(detections) > 0

    def detect(
        self,
        image: Union[np.ndarray, str],
        confidence_threshold: float,
    ) -> List[Detection]:
        """Run the model and return cat detections at or above the threshold."""
        frame = self._load_frame(image)
        conf = confidence_threshold / 100.0

        start_time = time.time()
        results = self.model(
            frame,
            conf=conf,
            classes=self.cat_class_ids,
            verbose=False,
        )
        self.total_inference_time += time.time() - start_time
        self.frame_count += 1

        detections = []
        for result in results:
            boxes = result.boxes
            for i in range(len(boxes)):
                class_id = int(boxes.cls[i])
                confidence = float(boxes.conf[i])
                if class_id not in self.cat_class_ids or confidence < conf:
                    continue

                x1, y1, x2, y2 = boxes.xyxy[i].cpu().numpy()
                detections.append(Detection(
                    class_id=class_id,
                    class_name=self.class_names[class_id],
                    confidence=confidence,
                    bbox=(int(x1), int(y1), int(x2 - x1), int(y2 - y1)),
                ))

        self.detection_count += len(detections)
        logger.debug("Cat detections: %d (conf >= %.2f)", len(detections), conf)
        return detections

    @staticmethod
    def _load_frame(image: Union[np.ndarray, str]) -> np.ndarray:
        if isinstance(image, np.ndarray):
            return image
        frame = cv2.imread(str(image))
        if frame is None:
            raise ValueError(f"Cannot read image: {image}")
        return frame

    def get_stats(self) -> Dict:
        """Inference statistics."""
        return {
            "frame_count": self.frame_count,
            "detection_count": self.detection_count,
            "total_inference_time": self.total_inference_time,
            "avg_inference_time": self.total_inference_time / self.frame_count if self.frame_count > 0 else 0,
        }
