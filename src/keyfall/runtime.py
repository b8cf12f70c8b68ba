import logging
from pathlib import Path
from typing import Optional

import pygame

from keyfall.chart import load_chart
from keyfall.config import BASE_SPEED, FPS_CAP, FULLSCREEN, W, H
from keyfall.input_modes import hotkeys_for, key_label
from keyfall.renderers import Fonts, draw_key_labels, render_intents
from keyfall.session import Session, lane_x

log = logging.getLogger(__name__)


# ---------------- Timing ----------------
def frame_elapsed_ms(fps: float) -> Optional[float]:
    """Wall time of the last frame, or None while the clock has no estimate yet."""
    if not fps:
        return None
    return 1000.0 / fps


def start_music(audio: Optional[Path]) -> bool:
    if audio is None:
        return False
    try:
        pygame.mixer.music.load(str(audio))
        pygame.mixer.music.play()
    except pygame.error as e:
        log.warning("cannot play %s: %s", audio, e)
        return False
    log.info("playing %s", audio)
    return True


def main(chart_path, speed: float = BASE_SPEED, fps_cap: int = FPS_CAP, fullscreen: bool = FULLSCREEN):
    chart = load_chart(chart_path)
    keys = hotkeys_for(chart.lanes)

    pygame.mixer.pre_init(44100, -16, 2, 2048)
    pygame.init()

    flags = pygame.FULLSCREEN if fullscreen else 0
    screen = pygame.display.set_mode((0, 0) if fullscreen else (W, H), flags)
    caption = f"keyfall - {chart.title}" if chart.title else "keyfall"
    pygame.display.set_caption(caption)
    fonts = Fonts()
    clock = pygame.time.Clock()

    session = Session.from_chart(chart, speed=speed)
    labels = [key_label(k) for k in keys]
    music_started = False

    running = True
    while running:
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN and e.key == pygame.K_ESCAPE:
                running = False
        if not running:
            break

        if not music_started:
            start_music(chart.audio)
            music_started = True

        pressed = pygame.key.get_pressed()
        held = [bool(pressed[k]) for k in keys]
        fps = clock.get_fps()
        session.tick(frame_elapsed_ms(fps), held)

        w, h = screen.get_size()
        render_intents(screen, session.draw_intents(w, h, fps=fps), fonts)
        draw_key_labels(screen, labels, lambda i: lane_x(w, len(keys), i), fonts.label)
        pygame.display.flip()

        music_busy = pygame.mixer.get_init() and pygame.mixer.music.get_busy()
        if session.finished and not music_busy:
            log.info("chart finished, score %d", session.score.total)
            running = False

        clock.tick(fps_cap)

    pygame.quit()
    return session.score.total
