def format_bytes(bytes_size: int | float) -> str:
    if bytes_size < 0:
        raise ValueError("Bytes size must be non-negative")

    units = ["B", "KB", "MB", "GB", "TB"]

    for unit in units:
        if bytes_size < 1024.0:
            return f"{bytes_size:.2f} {unit}"

        bytes_size /= 1024.0

    return f"{bytes_size:.2f} PB"


def format_time(elapsed_seconds: float) -> str:
    DAY_SECONDS = 86_400
    HOUR_SECONDS = 3_600
    MINUTE_SECONDS = 60

    days, remainder = divmod(elapsed_seconds, DAY_SECONDS)
    hours, remainder = divmod(remainder, HOUR_SECONDS)
    minutes, seconds = divmod(remainder, MINUTE_SECONDS)

    return f"{int(days):02d}d {int(hours):02d}h {int(minutes):02d}m {seconds:05.2f}s"


def format_uptime(percent: float) -> str:
    if percent < 0:
        return "N/A"

    if percent >= 100:
        return "100%"

    return f"{percent:.2f}%"


def format_response_time(milliseconds: int | float) -> str:
    if milliseconds <= 0:
        return "-"

    if milliseconds < 1_000:
        return f"{round(milliseconds)}ms"

    return f"{milliseconds / 1_000:.1f}s"
