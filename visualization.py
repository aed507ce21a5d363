from typing import Dict, Optional, Tuple

import cv2
import mediapipe as mp

from pose_types import LANDMARK_NAMES, Landmark, PoseSample

HIGHLIGHT = {
    "nose": (0, 165, 255),
    "left_shoulder": (255, 0, 0),
    "right_shoulder": (255, 0, 0),
    "left_wrist": (0, 255, 255),
    "right_wrist": (0, 255, 255),
    "left_hip": (255, 255, 0),
    "right_hip": (255, 255, 0),
}


def _to_pixel(lm: Landmark, width: int, height: int, mirror: bool) -> Tuple[int, int]:
    x = 1.0 - lm.x if mirror else lm.x
    return int(x * width), int(lm.y * height)


def draw_pose(
    frame,
    sample: Optional[PoseSample],
    highlight: Optional[Dict[str, Tuple[int, int, int]]] = None,
    mirror: bool = True,
) -> None:
    if sample is None or not sample.valid:
        return
    highlight = HIGHLIGHT if highlight is None else highlight
    height, width = frame.shape[:2]

    for a, b in mp.solutions.pose.POSE_CONNECTIONS:
        lm_a = sample.get(a)
        lm_b = sample.get(b)
        if lm_a is None or lm_b is None:
            continue
        cv2.line(frame, _to_pixel(lm_a, width, height, mirror), _to_pixel(lm_b, width, height, mirror), (0, 255, 0), 2)

    for idx in range(len(sample.landmarks)):
        lm = sample.get(idx)
        if lm is None:
            continue
        color = highlight.get(LANDMARK_NAMES.get(idx, ""), (0, 255, 255))
        cv2.circle(frame, _to_pixel(lm, width, height, mirror), 5, color, -1)


def draw_countdown_bar(frame, remaining: float, total: float, origin=(10, 10), size=(300, 14)) -> None:
    if total <= 0:
        return
    x, y = origin
    w, h = size
    filled = int(w * max(0.0, min(1.0, remaining / total)))
    color = (0, 200, 0) if remaining / total > 0.33 else (0, 80, 255)
    cv2.rectangle(frame, (x, y), (x + w, y + h), (60, 60, 60), -1)
    cv2.rectangle(frame, (x, y), (x + filled, y + h), color, -1)


def draw_result_banner(frame, success: bool, confidence: float) -> None:
    height, width = frame.shape[:2]
    color = (40, 160, 40) if success else (40, 40, 200)
    text = f"SUCCESS  {int(round(confidence * 100))}%" if success else "FAIL"
    overlay = frame.copy()
    cv2.rectangle(overlay, (0, height // 2 - 50), (width, height // 2 + 50), color, -1)
    cv2.addWeighted(overlay, 0.6, frame, 0.4, 0, frame)
    (tw, th), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 1.6, 3)
    cv2.putText(frame, text, ((width - tw) // 2, height // 2 + th // 2), cv2.FONT_HERSHEY_SIMPLEX, 1.6, (255, 255, 255), 3)
