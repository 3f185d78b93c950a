def target_size(width: int, height: int, max_width: int) -> tuple[int, int]:
    """Scale (width, height) down to ``max_width``, keeping aspect ratio.

    Never upscales; each side is at least 1px.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"surface must have positive dimensions, got {width}x{height}")
    if max_width <= 0:
        raise ValueError(f"max_width must be positive, got {max_width}")
    scale = min(1.0, max_width / width)
    return max(1, round(width * scale)), max(1, round(height * scale))
