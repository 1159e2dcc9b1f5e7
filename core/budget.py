"""Greedy character-budget packing of file contents into prompt text."""

from dataclasses import dataclass

TRUNCATION_MARKER = "\n[... truncated to fit context window ...]"


@dataclass(frozen=True)
class BlockFormat:
    """How one file is rendered. Templates may use {path} and {type}."""

    header: str
    footer: str
    stub: str
    marker: str = TRUNCATION_MARKER


def order_by_priority(files, priority_fn):
    """High-priority files first, low-priority last, original order otherwise."""
    high = [f for f in files if priority_fn(f)]
    low = [f for f in files if not priority_fn(f)]
    return high + low


def pack_files(files, ceiling, priority_fn, block_format):
    """Render files into a single string that never exceeds `ceiling` chars.

    Each file is emitted whole when it fits. Otherwise its content is cut at
    the remaining budget and followed by the truncation marker. When not even
    one content character fits, a path-only stub is emitted instead, and when
    the stub does not fit either the file is left out.
    """
    if ceiling < 0:
        raise ValueError(f"ceiling must be non-negative, got {ceiling}")

    parts = []
    total = 0
    for f in order_by_priority(files, priority_fn):
        remaining = ceiling - total
        header = block_format.header.format(path=f.path, type=f.type)
        footer = block_format.footer.format(path=f.path, type=f.type)
        frame = len(header) + len(footer)

        if frame + len(f.content) <= remaining:
            block = header + f.content + footer
        else:
            room = remaining - frame - len(block_format.marker)
            if room > 0:
                block = header + f.content[:room] + block_format.marker + footer
            else:
                block = block_format.stub.format(path=f.path, type=f.type)
                if len(block) > remaining:
                    continue

        parts.append(block)
        total += len(block)

    return "".join(parts)
