"""Per-page render context.

The site build creates one PageContext per page, passes it to render(), and
reads it back afterwards. It is both an input (the publish date shown in the
title) and an output (the summary taken from the first paragraph).

Example:
    ctx = PageContext(date=datetime.date(2024, 3, 1))
    body = render(doc, ctx)
    feed_entry(title, body, summary=ctx.summary)

Thread Safety:
    A PageContext is mutated during render; never share one between
    concurrent renders.

"""

import datetime
from dataclasses import dataclass


@dataclass(slots=True)
class PageContext:
    """Caller-owned page data read and written by the renderer.

    Attributes:
        date: Publish date rendered into level-1 headings, if set
        summary: Plain text of the first paragraph. Only written while
            empty, so a summary set by the caller (e.g. from front matter)
            is kept.

    """

    date: datetime.date | None = None
    summary: str | None = None
