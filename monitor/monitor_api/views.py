import logging
from io import BytesIO

import openpyxl
from django.http import HttpResponse, JsonResponse
from django.utils import timezone
from django.views.decorators.http import require_GET
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.styles.borders import Border, Side
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from metrics.sampler import default_sampler

logger = logging.getLogger(__name__)

REPORT_FORMATS = ('xlsx', 'pdf')


@require_GET
def health(request):
    return JsonResponse({"status": "Backend running"})


@require_GET
def data(request):
    return JsonResponse({"message": "Hello from Kubernetes Backend"})


@require_GET
def generate_report(request):
    """
    Exporta o snapshot atual em XLSX (padrão) ou PDF.
    Não há histórico no servidor: o relatório é de um único instante.
    """
    format_param = request.GET.get("format", "xlsx")
    if format_param not in REPORT_FORMATS:
        return HttpResponse(f"Formato inválido: {format_param}", status=400)

    snapshot = default_sampler().snapshot()
    logger.info("[REPORT] Gerando relatório %s (%s)", format_param, snapshot["timestamp"])

    if format_param == 'pdf':
        return generate_pdf_report(snapshot)
    return generate_xlsx_report(snapshot)


def _report_filename(extension):
    now_local = timezone.localtime(timezone.now())
    return f"relatorio_snapshot_{now_local.strftime('%Y%m%d_%H%M')}.{extension}"


def generate_xlsx_report(snapshot):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Snapshot"

    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=12)
    center_align = Alignment(horizontal="center", vertical="center")
    thin = Side(style='thin')
    border_style = Border(left=thin, right=thin, top=thin, bottom=thin)

    ws.merge_cells('A1:C1')
    ws['A1'] = "Relatório de Monitoramento - Snapshot"
    ws['A1'].font = Font(bold=True, size=14)
    ws['A1'].alignment = center_align
    ws['A3'] = f"Capturado em: {snapshot['timestamp']}"

    def write_table(start_row, title, headers, rows):
        ws.cell(row=start_row, column=1, value=title).font = Font(bold=True)
        start_row += 1
        for col_num, header in enumerate(headers, 1):
            cell = ws.cell(row=start_row, column=col_num, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = center_align
            cell.border = border_style
        start_row += 1
        if not rows:
            ws.cell(row=start_row, column=1, value="Sem dados").alignment = center_align
            return start_row + 2
        for row in rows:
            for col_num, value in enumerate(row, 1):
                cell = ws.cell(row=start_row, column=col_num, value=value)
                cell.border = border_style
                cell.alignment = center_align
            start_row += 1
        return start_row + 1

    row = write_table(
        5, "MÉTRICAS", ["Métrica", "Valor", "Unidade"],
        [(m["label"], m["value"], m["unit"]) for m in snapshot["metrics"]],
    )
    row = write_table(
        row, "SERVIÇOS", ["Serviço", "Status", "Latência (ms)"],
        [(s["name"], s["status"], s["latency"]) for s in snapshot["services"]],
    )
    write_table(
        row, "ALERTAS", ["Severidade", "Título", "Detalhe"],
        [(a["severity"], a["title"], a["detail"]) for a in snapshot["alerts"]],
    )

    ws.column_dimensions['A'].width = 25
    ws.column_dimensions['B'].width = 20
    ws.column_dimensions['C'].width = 35

    output = BytesIO()
    wb.save(output)
    output.seek(0)

    response = HttpResponse(output.getvalue(), content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    response['Content-Disposition'] = f'attachment; filename="{_report_filename("xlsx")}"'
    return response


TABLE_STYLE = TableStyle([
    ('BACKGROUND', (0, 0), (-1, 0), colors.darkblue),
    ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
    ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
    ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
    ('GRID', (0, 0), (-1, -1), 1, colors.black),
])


def generate_pdf_report(snapshot):
    output = BytesIO()
    doc = SimpleDocTemplate(output, pagesize=letter)
    styles = getSampleStyleSheet()
    story = [
        Paragraph("Relatório de Monitoramento - Snapshot", styles['Title']),
        Spacer(1, 12),
        Paragraph(f"<b>Capturado em:</b> {snapshot['timestamp']}", styles['Normal']),
        Spacer(1, 20),
    ]

    sections = [
        ("Métricas", ['Métrica', 'Valor', 'Unidade'],
         [[m["label"], f"{m['value']:.1f}", m["unit"]] for m in snapshot["metrics"]]),
        ("Serviços", ['Serviço', 'Status', 'Latência (ms)'],
         [[s["name"], s["status"], str(s["latency"])] for s in snapshot["services"]]),
        ("Alertas", ['Severidade', 'Título', 'Detalhe'],
         [[a["severity"], a["title"], a["detail"]] for a in snapshot["alerts"]]),
    ]
    for title, headers, rows in sections:
        story.append(Paragraph(f"<b>{title}</b>", styles['Heading2']))
        if not rows:
            story.append(Paragraph("Sem dados.", styles['Normal']))
        else:
            t = Table([headers] + rows, colWidths=[2 * inch, 1.5 * inch, 2.5 * inch])
            t.setStyle(TABLE_STYLE)
            story.append(t)
        story.append(Spacer(1, 20))

    doc.build(story)
    output.seek(0)

    response = HttpResponse(output.getvalue(), content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{_report_filename("pdf")}"'
    return response
