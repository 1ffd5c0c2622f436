KB = 1024
MB = 1024 * 1024
GB = 1024 * 1024 * 1024


def format_bytes(size: int) -> str:
    if size < KB:
        return f"{size} B"
    if size < MB:
        return f"{size / KB:.2f} KB"
    if size < GB:
        return f"{size / MB:.2f} MB"
    return f"{size / GB:.2f} GB"


def format_rate(bytes_per_sec: float) -> str:
    if bytes_per_sec < KB:
        return f"{bytes_per_sec:.2f} B/s"
    if bytes_per_sec < MB:
        return f"{bytes_per_sec / KB:.2f} KB/s"
    if bytes_per_sec < GB:
        return f"{bytes_per_sec / MB:.2f} MB/s"
    return f"{bytes_per_sec / GB:.2f} GB/s"


def format_duration(seconds: float) -> str:
    if seconds < 1e-3:
        return f"{seconds * 1e6:.2f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.2f}ms"
    return f"{seconds:.2f}s"


def format_ratio(ratio: float) -> str:
    if ratio == float("inf"):
        return "undefined"
    return f"{ratio:.2f}x"
