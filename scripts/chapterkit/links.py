"""
External link checking.

Links are pulled from the rendered Markdown (so code samples and link
reference definitions are handled the way a reader would see them) and
each http(s) target gets a HEAD request. The outcome is a typed result
rather than an exception.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Union

import markdown
import requests
from bs4 import BeautifulSoup


@dataclass(frozen=True)
class LinkOk:
    status: int

    @property
    def healthy(self):
        return self.status == 200


@dataclass(frozen=True)
class LinkUnreachable:
    reason: str
    healthy = False


@dataclass(frozen=True)
class LinkTimeout:
    healthy = False


LinkCheckResult = Union[LinkOk, LinkUnreachable, LinkTimeout]


class Link(NamedTuple):
    href: str
    title: str
    content: str


def extract_links(text) -> List[Link]:
    """All <a href> targets in the rendered markdown, in document order."""
    rendered = markdown.markdown(text, extensions=["fenced_code", "tables"])
    soup = BeautifulSoup(rendered, "html.parser")
    return [
        Link(a["href"], a.get("title", ""), a.get_text())
        for a in soup.find_all("a", href=True)
    ]


def is_external(href):
    return href.startswith("http")


def check_link(href, timeout=10) -> LinkCheckResult:
    try:
        response = requests.head(href, timeout=timeout, allow_redirects=True)
    except requests.exceptions.Timeout:
        return LinkTimeout()
    except requests.exceptions.ConnectionError as e:
        return LinkUnreachable(str(e))
    except requests.exceptions.RequestException as e:
        # Malformed URLs, bad schemes, redirect loops
        return LinkUnreachable(str(e))
    return LinkOk(response.status_code)


def describe(link, result):
    """One report line for an unhealthy link, or None if it's fine."""
    if isinstance(result, LinkOk):
        if result.healthy:
            return None
        return f"Error: {link.href}: {result.status}"
    if isinstance(result, LinkTimeout):
        return f"Timed out: {link.href} {link.title} {link.content}".rstrip()
    return f"Connection refused: {link.href} {link.title} {link.content}".rstrip()
