"""Generator trampoline for the tree walks.

Documents may nest far deeper than the interpreter's recursion limit, so the
expander and the type checker are written as step generators: a step yields
the sub-step it needs, and is resumed with that sub-step's return value.
`trampoline()` runs the steps on an explicit stack.
"""

from __future__ import annotations

from typing import Any, Generator, List

Step = Generator["Step", Any, Any]


def trampoline(step: Step) -> Any:
    stack: List[Step] = [step]
    value: Any = None
    while stack:
        try:
            sub = stack[-1].send(value)
        except StopIteration as done:
            stack.pop()
            value = done.value
        else:
            stack.append(sub)
            value = None
    return value
