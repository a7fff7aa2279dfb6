"""Build template context from profile statistics and render text reports."""

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from ..core.models import ProfileStats
from ..core.ranking import DEFAULT_TOP_N, percentage, rank

DEFAULT_TEMPLATE = Path(__file__).parent / 'templates' / 'default_report.j2'


def _percent_str(count: int, total: int) -> str:
    return f"{percentage(count, total):.2f}"


def build_report_context(stats: ProfileStats, top_n: int = DEFAULT_TOP_N) -> dict[str, Any]:
    """
    Build template context from resolved profile statistics.

    Args:
        stats: Fully resolved profile
        top_n: Number of entries to keep per granularity

    Returns:
        Dictionary with template variables:
        - total: overall sample count
        - top_n: requested entry count, used in section headings
        - lines / functions / files: ranked entries with formatted fields
    """
    total = stats.overall.count

    lines = [
        {
            'address_hex': f"0x{line_stats.smallest_address:08x}",
            'file': line.function.file.filename,
            'function': line.function.name,
            'line': line.line_num,
            'count': line_stats.count,
            'percent_str': _percent_str(line_stats.count, total),
        }
        for line, line_stats in rank(stats.lines, top_n)
    ]
    functions = [
        {
            'file': func.file.filename,
            'function': func.name,
            'count': func_stats.count,
            'percent_str': _percent_str(func_stats.count, total),
        }
        for func, func_stats in rank(stats.functions, top_n)
    ]
    files = [
        {
            'file': file_def.filename,
            'count': file_stats.count,
            'percent_str': _percent_str(file_stats.count, total),
        }
        for file_def, file_stats in rank(stats.files, top_n)
    ]

    return {
        'total': total,
        'top_n': top_n,
        'lines': lines,
        'functions': functions,
        'files': files,
    }


def build_report_json(stats: ProfileStats, top_n: int = DEFAULT_TOP_N) -> dict[str, Any]:
    """Ranked report as a JSON-serializable dictionary (numbers, not strings)."""
    context = build_report_context(stats, top_n)
    for section in ('lines', 'functions', 'files'):
        for entry in context[section]:
            entry['percent'] = float(entry.pop('percent_str'))
    return context


def render_jinja2_template(template_path: str, context: dict) -> str:
    """Load and render a Jinja2 template.

    Raises:
        FileNotFoundError: If template file doesn't exist
        jinja2.TemplateError: If template has syntax errors
    """
    template_file = Path(template_path)
    if not template_file.exists():
        raise FileNotFoundError(f"Template file not found: {template_path}")

    env = Environment(
        loader=FileSystemLoader(template_file.parent),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    template = env.get_template(template_file.name)
    return template.render(**context)


def render_report(stats: ProfileStats, top_n: int = DEFAULT_TOP_N,
                  template_path: str = None) -> str:
    """Render the ranked text report, using the built-in template by default."""
    context = build_report_context(stats, top_n)
    return render_jinja2_template(template_path or str(DEFAULT_TEMPLATE), context)
