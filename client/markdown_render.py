import xml.etree.ElementTree as etree
from urllib.parse import urlsplit
from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

LINK_CLASS = "external-link"
LINK_MARKER = "↗"
SAFE_SCHEMES = ("", "http", "https", "mailto")


def is_safe_url(url: str) -> bool:
    """Relative URLs and http(s)/mailto only"""
    # Browsers ignore leading whitespace and control characters
    cleaned = "".join(ch for ch in url if ord(ch) > 32).strip()
    try:
        scheme = urlsplit(cleaned).scheme.lower()
    except ValueError:
        return False
    return scheme in SAFE_SCHEMES


class ExternalLinkTreeprocessor(Treeprocessor):
    """Open every link in a new context and mark it visually"""

    def run(self, root):
        for image in list(root.iter("img")):
            if not is_safe_url(image.get("src", "")):
                image.set("src", "")
        for anchor in list(root.iter("a")):
            if not is_safe_url(anchor.get("href", "")):
                anchor.attrib.pop("href", None)
            anchor.set("target", "_blank")
            anchor.set("rel", "noopener noreferrer")
            anchor.set("class", LINK_CLASS)
            marker = etree.SubElement(anchor, "span")
            marker.set("class", "link-icon")
            marker.text = LINK_MARKER


class NotesExtension(Extension):
    def extendMarkdown(self, md):
        # Raw HTML in notes is shown as text
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        # After inline parsing has produced the <a> elements
        md.treeprocessors.register(ExternalLinkTreeprocessor(md), "external_links", 5)


# GitHub-flavoured extras: bare URL autolinks, ~~strikethrough~~, task lists
EXTENSIONS = [
    "tables",
    "fenced_code",
    "sane_lists",
    "pymdownx.magiclink",
    "pymdownx.tilde",
    "pymdownx.tasklist",
]


def render_markdown(text: str) -> str:
    md = Markdown(extensions=[*EXTENSIONS, NotesExtension()])
    return md.convert(text)
