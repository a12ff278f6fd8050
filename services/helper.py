import time
import random
import string


def generate_unique_id():
    # Use a timestamp as the base for uniqueness
    timestamp = int(time.time() * 1000)  # Milliseconds since epoch
    # Convert timestamp to a base-36 string for shorter length
    timestamp_base36 = base36_encode(timestamp)

    # Add a random string to ensure uniqueness
    random_part = ''.join(random.choices(string.ascii_letters + string.digits, k=6))

    return f"{timestamp_base36}{random_part}".upper()


def base36_encode(num):
    """Encodes a number in base-36."""
    if not isinstance(num, int):
        raise TypeError("number must be an integer")
    if num < 0:
        raise ValueError("number must be non-negative")

    digits = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    result = ""
    while num > 0:
        num, remainder = divmod(num, 36)
        result = digits[remainder] + result
    return result or "0"


def truncate(text, max_length):
    """Shorten ``text`` to ``max_length`` characters, appending '...' when cut."""
    if not text:
        return ""
    return text[:max_length] + "..." if len(text) > max_length else text
