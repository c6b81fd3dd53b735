import re

def sanitize_string(v: str) -> str:
    if not isinstance(v, str):
        return v
    # 1. Strip HTML tags
    v = re.sub(r'<[^>]*>', '', v)
    # 2. Trim whitespace
    return v.strip()


def sanitize_tags(tags):
    """Clean every string tag and drop the ones that end up empty, keeping first-seen order.

    Non-string items are passed through untouched so schema validation rejects them.
    """
    if not isinstance(tags, (list, tuple)):
        return tags
    cleaned = []
    for tag in tags:
        if not isinstance(tag, str):
            cleaned.append(tag)
            continue
        tag = sanitize_string(tag)
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned
