import html

from markdown_it import MarkdownIt

# сырой HTML не распознается и остается текстом, который затем экранируется
_parser = MarkdownIt("commonmark", {"html": False})

_TEXT_TOKENS = {"text", "text_special"}


def render_inline(content: str) -> str:
    """
    Упрощенный markdown для отображения задачи: из разобранного документа
    остаются только текст и `код`, остальная разметка отбрасывается.
    """
    rendered = []

    for block in _parser.parse(content):
        if block.type != "inline":
            continue
        for token in block.children or []:
            if token.type in _TEXT_TOKENS:
                rendered.append(html.escape(token.content))
            elif token.type == "code_inline":
                rendered.append(f"<code>{html.escape(token.content)}</code>")

    return "".join(rendered)
