from typing import List, Optional, Sequence, Tuple

import cv2

from classifier import DebugValues
from game_session import GamePhase, SessionSnapshot

Box = Tuple[int, int, int, int]

PANEL_BG = (30, 30, 30)
PANEL_BORDER = (80, 80, 80)
ROW_HEIGHT = 24
VISIBLE_ROWS = 12

PHASE_HINTS = {
    GamePhase.IDLE: "W/S pick a target, Enter select, 1-0 practice",
    GamePhase.SELECTED: "Enter to start, Esc to go back",
    GamePhase.LOADING: "Loading missions...",
    GamePhase.PLAYING: "Get ready!",
    GamePhase.CLEARED: "Cleared! Space to continue",
}


def visible_range(count: int, selected: int, rows: int = VISIBLE_ROWS) -> range:
    """Rows to show so that ``selected`` stays roughly centred."""
    first = min(max(0, selected - rows // 2), max(0, count - rows))
    return range(first, min(count, first + rows))


def draw_target_panel(
    frame, targets: Sequence[str], selected: int, cleared: Sequence[str], width: int = 320
) -> List[Tuple[Box, int]]:
    """Right-hand target list. Returns clickable row boxes with their index."""
    frame_h, frame_w = frame.shape[:2]
    left = frame_w - width
    cv2.rectangle(frame, (left, 0), (frame_w, frame_h), PANEL_BG, -1)
    cv2.rectangle(frame, (left, 0), (frame_w, frame_h), PANEL_BORDER, 2)
    cv2.putText(frame, "Targets", (left + 12, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)

    rows: List[Tuple[Box, int]] = []
    baseline_y = 55
    for idx in visible_range(len(targets), selected):
        box = (left + 8, baseline_y - 16, frame_w - 8, baseline_y + 10)
        is_selected = idx == selected
        if is_selected:
            cv2.rectangle(frame, box[:2], box[2:], (60, 60, 60), -1)
        label = targets[idx] + (" *" if targets[idx] in cleared else "")
        color = (0, 255, 180) if is_selected else (220, 220, 220)
        cv2.putText(frame, label, (left + 16, baseline_y), cv2.FONT_HERSHEY_SIMPLEX, 0.55, color, 1)
        rows.append((box, idx))
        baseline_y += ROW_HEIGHT
    return rows


def hit_row(rows: Sequence[Tuple[Box, int]], x: int, y: int) -> Optional[int]:
    for (left, top, right, bottom), idx in rows:
        if left <= x <= right and top <= y <= bottom:
            return idx
    return None


def draw_lines(frame, lines: Sequence[str], origin=(10, 50), spacing: int = 28) -> None:
    x, y = origin
    for text in lines:
        # Dark outline keeps text readable over bright backgrounds.
        cv2.putText(frame, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 0, 0), 4)
        cv2.putText(frame, text, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        y += spacing


def status_lines(snap: SessionSnapshot, source_ready: bool, debug: Optional[DebugValues] = None) -> List[str]:
    lines = [f"Phase: {snap.phase.value}", f"Score: {snap.score}"]
    if snap.target:
        lines.append(f"Target: {snap.target}")
    if snap.missions_total:
        lines.append(f"Missions: {snap.successes}/{len(snap.results)} of {snap.missions_total}  t={snap.elapsed:.1f}s")
    if snap.active_entry is not None:
        prompt = snap.active_entry.prompt or snap.active_entry.gesture.value
        lines.append(f">> {prompt}  ({snap.remaining_time:.1f}s)")
    if snap.waiting_for_source:
        lines.append("Step into the frame...")
    hint = PHASE_HINTS.get(snap.phase)
    if hint:
        lines.append(hint)
    if not source_ready:
        lines.append("Camera warming up")
    if snap.error:
        lines.append(f"Error: {snap.error}")
    if debug is not None:
        lines.append(f"nose ({debug.nose_x:.2f}, {debug.nose_y:.2f})  gap {debug.wrist_gap:.2f}")
    return lines
