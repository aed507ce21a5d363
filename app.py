import logging

import cv2
import numpy as np

from camera import CameraFeed, CameraStream
from classifier import GestureClassifier, debug_values
from combos import ComboResolver
from config import load_config
from errors import InvalidTransitionError
from game_session import GamePhase, GameSession
from gestures import GestureKind
from landmark_source import BufferedLandmarkSource
from mission_runner import MissionRunner
from mission_store import CachedMissionResolver, ChainedResolver, MissionStore
from pose_detection import PoseDetector
from scheduler import Scheduler
from ui import draw_lines, draw_target_panel, hit_row, status_lines
from visualization import draw_countdown_bar, draw_pose, draw_result_banner

logger = logging.getLogger(__name__)

WINDOW_NAME = "Motion Conquest"

# waitKeyEx codes differ per platform; cover Windows and GTK arrows.
KEY_UP = (2490368, 65362, ord("w"))
KEY_DOWN = (2621440, 65364, ord("s"))
KEY_ENTER = (13, 10)
KEY_ESC = 27
KEY_SPACE = 32
PRACTICE_KEYS = {ord(str((i + 1) % 10)): kind for i, kind in enumerate(GestureKind)}


def build_session(config, source: BufferedLandmarkSource, scheduler: Scheduler):
    runner = MissionRunner(source, GestureClassifier(), scheduler, config.runner)
    combos = ComboResolver()
    store = MissionStore(config.cache_dir, limits=config.session.time_limit_range)
    resolver = ChainedResolver([combos, CachedMissionResolver(store)])
    targets = combos.names() + [name for name in store.list() if name.lower() not in map(str.lower, combos.names())]
    return GameSession(runner, resolver, scheduler, config.session), targets


def handle_key(key: int, session: GameSession, targets, selected: int) -> int:
    """Apply one key press; returns the new selected row."""
    phase = session.phase
    if key in KEY_UP:
        return max(0, selected - 1)
    if key in KEY_DOWN:
        return min(len(targets) - 1, selected + 1)
    if key in KEY_ENTER:
        if phase in (GamePhase.IDLE, GamePhase.SELECTED) and session.target != targets[selected]:
            session.select_target(targets[selected])
        else:
            session.confirm()
    elif key == KEY_ESC:
        session.cancel()
    elif key == KEY_SPACE:
        session.acknowledge()
    elif key & 0xFF in PRACTICE_KEYS:
        session.trigger_gesture(PRACTICE_KEYS[key & 0xFF])
    return selected


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = load_config()

    source = BufferedLandmarkSource(buffer_size=config.pose.buffer_size)
    feed = CameraFeed(
        CameraStream(config.camera),
        PoseDetector(config.pose.min_detection_confidence, config.pose.min_tracking_confidence),
        source,
    )
    feed.start()
    scheduler = Scheduler()
    session, targets = build_session(config, source, scheduler)
    selected = 0
    show_debug = False

    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    clicks = []
    cv2.setMouseCallback(
        WINDOW_NAME,
        lambda event, x, y, flags, param: clicks.append((x, y)) if event == cv2.EVENT_LBUTTONDOWN else None,
    )

    while cv2.getWindowProperty(WINDOW_NAME, cv2.WND_PROP_VISIBLE) >= 1:
        frame = feed.step()
        # Pose runs on the raw frame; the player sees a mirror.
        canvas = cv2.flip(frame.image, 1) if frame.ok else np.zeros((config.camera.height, config.camera.width, 3), dtype=np.uint8)
        scheduler.run_pending()

        snap = session.snapshot()
        pose = feed.latest_pose()
        draw_pose(canvas, pose)
        debug = debug_values(pose) if show_debug and pose is not None else None
        draw_lines(canvas, status_lines(snap, source.ready, debug))
        if snap.active_entry is not None and not snap.waiting_for_source:
            draw_countdown_bar(canvas, snap.remaining_time, snap.active_entry.time_limit)
        if snap.phase == GamePhase.MISSION_RESULT and snap.last_result is not None:
            draw_result_banner(canvas, snap.last_result.success, snap.last_result.confidence)
        rows = draw_target_panel(canvas, targets, selected, snap.cleared_targets)
        cv2.imshow(WINDOW_NAME, canvas)

        while clicks:
            row = hit_row(rows, *clicks.pop(0))
            if row is not None:
                selected = row

        key = cv2.waitKeyEx(1)
        if key == -1:
            continue
        if key & 0xFF == ord("q"):
            break
        if key & 0xFF == ord("d"):
            show_debug = not show_debug
            continue
        try:
            selected = handle_key(key, session, targets, selected)
        except InvalidTransitionError as exc:
            logger.info("Ignored key: %s", exc)

    session.close()
    feed.close()
    cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
