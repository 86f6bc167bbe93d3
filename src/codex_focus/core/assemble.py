import logging

from codex_focus.models import ContextInfo, ContextNode, CursorRange, Document, FocusedCode, Position, ScopeSignature

logger = logging.getLogger(__name__)


def _focus_index(nodes: list[ContextNode]) -> int | None:
    for index in range(len(nodes) - 1, -1, -1):
        if nodes[index].can_be_used_as_code_range:
            return index
    return None


def _line_span(cursor_range: CursorRange, line_total: int) -> tuple[int, int]:
    first = cursor_range.start.line
    last = cursor_range.end.line
    if cursor_range.end.character == 0 and last > first:
        last -= 1
    last = min(last, line_total - 1)
    return first, max(first, last)


def _centered_window(first: int, last: int, target: CursorRange, size: int) -> tuple[int, int]:
    center = (target.start.line + target.end.line) // 2
    center = min(max(center, first), last)
    start = center - (size - 1) // 2
    start = max(first, min(start, last - size + 1))
    return start, start + size - 1


def _scope(node: ContextNode) -> ScopeSignature:
    return ScopeSignature(signature=node.signature, name=node.name, range=node.range)


def assemble_focused_code(
    context: ContextInfo,
    document: Document,
    target: CursorRange,
    max_lines: int,
) -> FocusedCode:
    """Fit the innermost usable scope and its breadcrumbs into ``max_lines``.

    The focus is the innermost node that can stand alone as a code block, or the
    whole file when there is none. Enclosing signatures are dropped outermost
    first until the focus fits. A focus longer than the budget is cut to a window
    around ``target`` and keeps only its own signature.
    """
    max_lines = max(1, max_lines)
    lines = document.lines
    if not lines:
        empty = CursorRange.at(0, 0)
        return FocusedCode(context=context, code="", code_range=empty, focused_range=target)

    focus_index = _focus_index(context.nodes)
    if focus_index is None:
        focus_range = CursorRange.between((0, 0), (len(lines) - 1, len(lines[-1].rstrip("\r\n"))))
        enclosing: list[ContextNode] = []
    else:
        focus_range = context.nodes[focus_index].range
        enclosing = context.nodes[:focus_index]

    first, last = _line_span(focus_range, len(lines))
    body_count = last - first + 1
    truncated = body_count > max_lines

    if not truncated:
        breadcrumbs = list(enclosing)
        while breadcrumbs and len(breadcrumbs) + body_count > max_lines:
            breadcrumbs.pop(0)
        start, end = first, last
    else:
        start, end = _centered_window(first, last, target, max_lines)
        breadcrumbs = [context.nodes[focus_index]] if focus_index is not None else []

    dropped = len(enclosing) - len(breadcrumbs) if not truncated else len(enclosing)
    if dropped or truncated:
        logger.debug(
            "Budget of %d lines: dropped %d enclosing signature(s), focus %d-%d of %d-%d",
            max_lines,
            dropped,
            start,
            end,
            first,
            last,
        )

    end_line = lines[end].rstrip("\r\n")
    code = "".join(lines[start:end]) + end_line
    return FocusedCode(
        context=context,
        scope_signatures=[_scope(node) for node in breadcrumbs],
        code=code,
        code_range=CursorRange(
            start=Position(line=start, character=0),
            end=Position(line=end, character=len(end_line)),
        ),
        focused_range=target,
        truncated=truncated,
    )
