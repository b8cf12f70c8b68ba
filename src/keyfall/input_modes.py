import pygame

# osu!mania defaults
KEYS_4 = [pygame.K_d, pygame.K_f, pygame.K_j, pygame.K_k]
KEYS_7 = [pygame.K_s, pygame.K_d, pygame.K_f, pygame.K_SPACE, pygame.K_j, pygame.K_k, pygame.K_l]

# everything else: home row outwards, space in the middle for odd counts
FALLBACK_LEFT = [pygame.K_f, pygame.K_d, pygame.K_s, pygame.K_a, pygame.K_q]
FALLBACK_RIGHT = [pygame.K_j, pygame.K_k, pygame.K_l, pygame.K_SEMICOLON, pygame.K_p]


def hotkeys_for(lanes: int):
    if lanes == 4:
        return list(KEYS_4)
    if lanes == 7:
        return list(KEYS_7)
    half = lanes // 2
    if half > len(FALLBACK_LEFT):
        raise ValueError(f"no key layout for {lanes} lanes")
    keys = list(reversed(FALLBACK_LEFT[:half]))
    if lanes % 2 == 1:
        keys.append(pygame.K_SPACE)
    keys.extend(FALLBACK_RIGHT[:half])
    return keys


def key_label(key) -> str:
    return pygame.key.name(key).upper()
