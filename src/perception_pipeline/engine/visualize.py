"""
Annotated-frame drawing for localized objects.
"""

import cv2
import numpy as np

from ..models import LocalizedObject

BOX_COLOR = (255, 255, 0)
TEXT_COLOR = (0, 255, 255)


def draw_localized_objects(frame: np.ndarray, objects: list[LocalizedObject]) -> np.ndarray:
    """Return a copy of frame with each object's box, name and distance drawn."""
    annotated = frame.copy()

    for obj in objects:
        x1, y1, x2, y2 = (int(round(c)) for c in obj.box)
        cv2.rectangle(annotated, (x1, y1), (x2, y2), BOX_COLOR, 2)
        cv2.putText(
            annotated,
            obj.name,
            (x1 + 5, y1 + 25),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.7,
            BOX_COLOR,
            2,
        )
        cv2.putText(
            annotated,
            f"{obj.position[2]:.2f}m",
            (x1 + 5, y1 + 50),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            TEXT_COLOR,
            1,
        )

    return annotated
