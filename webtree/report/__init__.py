"""webtree.report: генерация отчётов (JSON и HTML) для CLI и тестов."""

from webtree.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from webtree.report.json_report import render_json

__all__ = ["render_json", "render_html", "DEFAULT_TEMPLATE_DIR"]
