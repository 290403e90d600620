"""Renderização em texto (terminal) do estado do dashboard."""
from datetime import datetime

from .history import bar_height, clamp, summarize
from .keys import HELP

SPARK_CHARS = "▁▂▃▄▅▆▇█"
PROGRESS_WIDTH = 20

RESET = "\033[0m"
PALETTES = {
    "dark": {
        "operational": "\033[92m",
        "degraded": "\033[93m",
        "down": "\033[91m",
        "critical": "\033[91m",
        "warn": "\033[93m",
        "ok": "\033[92m",
        "title": "\033[1;97m",
    },
    "light": {
        "operational": "\033[32m",
        "degraded": "\033[33m",
        "down": "\033[31m",
        "critical": "\033[31m",
        "warn": "\033[33m",
        "ok": "\033[32m",
        "title": "\033[1;30m",
    },
}


def sparkline(history):
    chars = []
    for point in history:
        height = bar_height(point)
        idx = min(len(SPARK_CHARS) - 1, int(height / 100 * len(SPARK_CHARS)))
        chars.append(SPARK_CHARS[idx])
    return "".join(chars)


def chip(metric):
    """'warn' para percentuais acima de 80, 'ok' no resto."""
    if metric["unit"] == "%" and metric["value"] > 80:
        return "warn"
    return "ok"


def chip_caption(metric):
    return "Latency" if metric["unit"] == "ms" else "Usage"


def progress_width(metric):
    if metric["unit"] == "ms":
        return clamp(metric["value"] / 4, 0, 100)
    return clamp(metric["value"], 0, 100)


def progress_bar(percent, width=PROGRESS_WIDTH):
    filled = int(round(clamp(percent, 0, 100) / 100 * width))
    return "[" + "#" * filled + "-" * (width - filled) + "]"


class Renderer:

    def __init__(self, color=True, show_keys=False):
        self.color = color
        self.show_keys = show_keys

    def paint(self, theme, tag, text):
        if not self.color:
            return text
        code = PALETTES[theme].get(tag)
        return f"{code}{text}{RESET}" if code else text

    def render(self, state):
        lines = self.header(state)
        if state.error:
            lines.append(f"  ! {state.error}")
        lines.append("")
        lines.extend(getattr(self, f"tab_{state.active_tab}")(state))
        return "\n".join(lines)

    def header(self, state):
        if state.updated_at:
            try:
                updated = datetime.fromisoformat(state.updated_at.replace("Z", "+00:00")).strftime("%H:%M:%S")
            except ValueError:
                updated = state.updated_at
        else:
            updated = "..."
        badge = state.health_badge
        badge_tag = "ok" if badge == "Healthy" else ("down" if badge == "Error" else "warn")
        alerts = f" ({len(state.alerts)})" if state.alerts else ""
        lines = [
            self.paint(state.theme, "title", state.title),
            f"Real-time monitoring • Last updated {updated}   [Live] [{self.paint(state.theme, badge_tag, badge)}]",
            f"Tabs: overview | metrics | services | alerts{alerts} | infrastructure",
        ]
        if self.show_keys:
            lines.append(HELP)
        return lines

    def metric_card(self, state, metric, number):
        # padding antes de colorir: os códigos ANSI não contam como coluna
        caption = self.paint(state.theme, chip(metric), f"{chip_caption(metric):<8}")
        lines = [
            f"{number}. {metric['label']:<20} {caption} "
            f"{metric['value']} {metric['unit']}",
            f"  {sparkline(metric['history'])}  {progress_bar(progress_width(metric))}",
        ]
        if state.selected_metric == metric["key"]:
            stats = summarize(metric["history"])
            lines.append(
                f"  Min: {stats['min']:.1f} {metric['unit']}  "
                f"Max: {stats['max']:.1f} {metric['unit']}  "
                f"Avg: {stats['avg']:.1f} {metric['unit']}"
            )
        return lines

    def service_line(self, state, service):
        status = self.paint(state.theme, service["status"], service["status"])
        return f"  {service['name']:<20} {service['latency']} ms  {status}"

    def alert_line(self, state, alert):
        return f"  [{self.paint(state.theme, alert['severity'], alert['severity'])}] {alert['title']}: {alert['detail']}"

    def tab_overview(self, state):
        lines = ["  ".join(f"{s['label']}: {s['value']} ({s['trend']})" for s in state.system_stats), ""]
        for number, metric in enumerate(state.metrics, 1):
            lines.extend(self.metric_card(state, metric, number))
        lines.append("")
        lines.append(f"Service Health ({len(state.services)} services)")
        if not state.services:
            lines.append("  No services reported")
        lines.extend(self.service_line(state, s) for s in state.services)
        lines.append("")
        lines.append(f"Recent Alerts ({len(state.alerts)} active)")
        if not state.alerts:
            lines.append("  No active alerts")
        lines.extend(self.alert_line(state, a) for a in state.alerts)
        return lines

    def tab_metrics(self, state):
        lines = []
        for metric in state.metrics:
            stats = summarize(metric["history"])
            unit = metric["unit"]
            current = f"{metric['value']}{unit}"
            lines.append(f"{metric['label']}  {self.paint(state.theme, chip(metric), current)}")
            lines.append(f"  {sparkline(metric['history'])}")
            lines.append(
                f"  Current {metric['value']}{unit}  Avg {stats['avg']:.1f}{unit}  Peak {stats['max']:.1f}{unit}"
            )
        if not lines:
            lines.append("No metrics yet")
        return lines

    def tab_services(self, state):
        if not state.services:
            return ["No services reported"]
        return [self.service_line(state, s) for s in state.services]

    def tab_alerts(self, state):
        if not state.alerts:
            return ["No active alerts"]
        return [self.alert_line(state, a) for a in state.alerts]

    def tab_infrastructure(self, state):
        lines = [f"Clusters ({len(state.clusters)} active)"]
        if not state.clusters:
            lines.append("  No clusters")
        for c in state.clusters:
            lines.append(f"  {c['name']}  {c['nodes']} nodes  {c['pods']} pods running")
            lines.append(f"    {progress_bar(c['utilization'])} Utilization {c['utilization']}%")
        lines.append("")
        lines.append(f"Traffic by Region ({len(state.regions)} regions)")
        if not state.regions:
            lines.append("  No regions")
        for r in state.regions:
            lines.append(f"  {r['name']:<12} {progress_bar(r['traffic'])} {r['traffic']}%")
        return lines
