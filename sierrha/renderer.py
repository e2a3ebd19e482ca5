# File: sierrha/renderer.py
"""sierrha.renderer: Генерация запасной HTML-страницы ошибки с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
SEVERITIES = ("info", "warning", "error")


class ErrorPageRenderer:
    """Рендерит простую страницу ошибки: заголовок в <title> и <h1>, текст в <p>.

    Пример:
    ```python
    renderer = ErrorPageRenderer()
    html = renderer.render("Page not found", "The requested page does not exist.")
    ```
    """

    def __init__(
        self,
        template_dir: Union[Path, str] = DEFAULT_TEMPLATE_DIR,
        template_name: str = "error_page.html.j2",
    ) -> None:
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml", "j2"]),
        )
        self.template_name = template_name

    def render(self, title: str, message: str, severity: str = "error", lang: str = "en") -> str:
        if severity not in SEVERITIES:
            raise ValueError(f"Unknown severity {severity!r}, expected one of {SEVERITIES}")
        template = self.env.get_template(self.template_name)
        return template.render(title=title, message=message, severity=severity, lang=lang)


__all__ = ["ErrorPageRenderer", "DEFAULT_TEMPLATE_DIR", "SEVERITIES"]
