from .models import LinkMetrics, RunReport


def render_metrics(m: LinkMetrics, bandwidth_label: str = "Bandwidth") -> list[str]:
    return [
        f"  Packets: Transmitted = {m.transmitted}, Received = {m.received}, "
        f"Lost = {m.packets_lost} ({m.loss_percentage:.2f}% loss)",
        f"  Bytes transferred: {m.bytes_transferred} ({m.megabytes:.2f} MB)",
        f"  Time: {m.elapsed_ms} ms",
        f"  {bandwidth_label}: {m.bandwidth_mbps:.2f} Mbps",
    ]


def render_report(report: RunReport) -> str:
    if not report.workers:
        return "No worker statistics."

    lines = [f"Flood probe report for {report.target} ({report.duration_s}s, {len(report.workers)} workers)"]
    for i, m in enumerate(report.workers):
        lines.append(f"Worker {i} statistics:")
        lines.extend(render_metrics(m))

    lines.append("")
    lines.append("Total statistics:")
    lines.extend(render_metrics(report.total, bandwidth_label="Total Bandwidth"))
    return "\n".join(lines)
