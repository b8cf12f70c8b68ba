import pygame

from keyfall.config import BG, JUDGMENT_COLORS, SKIN_COLORS
from keyfall.session import (
    LineIntent, NumberIntent, RectIntent, ScaledSpriteIntent, SpriteIntent,
)

JUDGMENT_TEXT = {"hit0": "MISS", "hit50": "50", "hit100": "100", "hit300": "300"}


class Fonts:
    def __init__(self):
        self.digits = pygame.font.SysFont("Arial", 18, bold=True)
        self.judgment = pygame.font.SysFont("Arial", 72, bold=True)
        self.label = pygame.font.SysFont("Arial", 20)


def _alpha_rect(screen, rect, rgba):
    surf = pygame.Surface((max(1, int(rect.w)), max(1, int(rect.h))), pygame.SRCALPHA)
    surf.fill(rgba)
    screen.blit(surf, (rect.x, rect.y))


def draw_background(screen):
    screen.fill(BG)


def draw_sprite(screen, it: SpriteIntent):
    col = SKIN_COLORS.get(it.skin, (200, 200, 200))
    r = pygame.Rect(int(it.x), int(it.y), int(it.w), max(1, int(it.h)))

    if it.name.startswith("mania-key"):
        pressed = it.name.endswith("D")
        pygame.draw.rect(screen, (35, 35, 50), r)
        if pressed:
            _alpha_rect(screen, r, (*col, 110))
        pygame.draw.rect(screen, col, r, width=2)
        return

    if it.name.endswith("L"):
        # hold body
        _alpha_rect(screen, r, (*col, 90))
        return
    if it.name.endswith("H"):
        pygame.draw.rect(screen, col, r, border_radius=6)
        pygame.draw.rect(screen, (255, 255, 255), r, width=2, border_radius=6)
        return
    pygame.draw.rect(screen, col, r, border_radius=6)


def draw_judgment(screen, it: ScaledSpriteIntent, fonts: Fonts):
    if it.scale <= 0:
        return
    col = JUDGMENT_COLORS.get(it.judgment.name, (255, 255, 255))
    s = fonts.judgment.render(JUDGMENT_TEXT.get(it.name, it.name), True, col)
    s = pygame.transform.rotozoom(s, 0, it.scale)
    screen.blit(s, (it.cx - s.get_width() // 2, it.cy - s.get_height() // 2))


def draw_number(screen, it: NumberIntent, fonts: Fonts):
    s = fonts.digits.render(str(it.value), True, (255, 255, 255))
    s = pygame.transform.scale(s, (int(s.get_width() * it.digit_scale / 2), int(s.get_height() * it.digit_scale / 2)))
    screen.blit(s, (it.x, it.y))


def render_intents(screen, intents, fonts: Fonts):
    draw_background(screen)
    # stable sort keeps emission order inside a layer
    layered = sorted(
        (it for it in intents if isinstance(it, (RectIntent, SpriteIntent))),
        key=lambda it: it.z,
    )
    for it in layered:
        if isinstance(it, RectIntent):
            pygame.draw.rect(screen, it.color, pygame.Rect(int(it.x), int(it.y), int(it.w), int(it.h)))
        else:
            draw_sprite(screen, it)

    lines = [it for it in intents if isinstance(it, LineIntent)]
    if lines:
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        for it in lines:
            pygame.draw.line(overlay, it.color, (it.x1, it.y1), (it.x2, it.y2), 1)
        screen.blit(overlay, (0, 0))

    for it in intents:
        if isinstance(it, ScaledSpriteIntent):
            draw_judgment(screen, it, fonts)
        elif isinstance(it, NumberIntent):
            draw_number(screen, it, fonts)


def draw_key_labels(screen, labels, x_of, font):
    h = screen.get_height()
    for i, lab in enumerate(labels):
        s = font.render(lab, True, (220, 220, 220))
        screen.blit(s, (x_of(i) + 10, h - 36))
