"""
Vaccination Report Exports

Excel and PDF reports of one batch's vaccination schedule.
"""

import io
from datetime import date
from typing import Dict, Iterable, List, Optional

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, PatternFill

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, HRFlowable
from reportlab.lib.enums import TA_CENTER

from core.dates import local_today

EXPORT_DATE_FORMAT = '%b %d, %Y'

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
PDF_CONTENT_TYPE = 'application/pdf'


def format_export_date(value: Optional[date]) -> str:
    """``Mon DD, YYYY``, or '-' when there is no date"""
    if value is None:
        return '-'
    return value.strftime(EXPORT_DATE_FORMAT)


def export_status_label(vaccination, today: Optional[date] = None) -> str:
    if vaccination.completed_date:
        return 'Completed'
    if vaccination.scheduled_date < (today or local_today()):
        return 'Overdue'
    return 'Scheduled'


def categorize_vaccines(vaccinations: Iterable) -> Dict[str, List]:
    """
    Split doses into completed (latest completion first) and upcoming
    (earliest scheduled first).
    """
    completed = []
    upcoming = []
    for vaccination in vaccinations:
        if vaccination.completed_date:
            completed.append(vaccination)
        else:
            upcoming.append(vaccination)

    completed.sort(key=lambda v: v.completed_date, reverse=True)
    upcoming.sort(key=lambda v: v.scheduled_date)
    return {'completed': completed, 'upcoming': upcoming}


def vaccination_summary(vaccinations: List, today: Optional[date] = None) -> Dict[str, int]:
    today = today or local_today()
    groups = categorize_vaccines(vaccinations)
    return {
        'total': len(vaccinations),
        'completed': len(groups['completed']),
        'upcoming': len(groups['upcoming']),
        'overdue': sum(1 for v in groups['upcoming'] if v.scheduled_date < today),
    }


def _money(value) -> str:
    return f"{value:,.2f}" if value else '-'


def _batch_rows(batch) -> List[List[str]]:
    rows = [
        ['Batch Name:', batch.name],
        ['Batch Code:', batch.batch_code],
        ['Breed:', batch.breed],
        ['Start Date:', format_export_date(batch.start_date)],
        ['Current Size:', f"{batch.current_size} birds"],
        ['Initial Size:', f"{batch.initial_size} birds"],
    ]
    genders = []
    if batch.male_count is not None:
        genders.append(f"Male: {batch.male_count}")
    if batch.female_count is not None:
        genders.append(f"Female: {batch.female_count}")
    if genders:
        rows.append(['Gender Breakdown:', ', '.join(genders)])
    return rows


# =============================================================================
# EXCEL
# =============================================================================

def build_vaccination_workbook(batch, vaccinations: List, today: Optional[date] = None) -> Workbook:
    """Overview, Completed Vaccinations and Upcoming Vaccinations sheets"""
    today = today or local_today()
    groups = categorize_vaccines(vaccinations)
    summary = vaccination_summary(vaccinations, today)

    wb = Workbook()
    bold = Font(bold=True)
    section_font = Font(bold=True, size=12)
    header_font = Font(bold=True, color='FFFFFF')

    # === OVERVIEW SHEET ===
    ws = wb.active
    ws.title = 'Overview'
    ws.merge_cells('A1:D1')
    ws['A1'] = 'Vaccination Report'
    ws['A1'].font = Font(bold=True, size=16)
    ws['A1'].alignment = Alignment(horizontal='center', vertical='center')

    ws.append([])
    ws.append(['Batch Information'])
    ws.cell(row=ws.max_row, column=1).font = section_font
    for row in _batch_rows(batch):
        ws.append(row)
        ws.cell(row=ws.max_row, column=1).font = bold

    ws.append([])
    ws.append(['Vaccination Summary'])
    ws.cell(row=ws.max_row, column=1).font = section_font
    for label, key in (('Total Vaccinations:', 'total'), ('Completed:', 'completed'),
                       ('Upcoming:', 'upcoming'), ('Overdue:', 'overdue')):
        ws.append([label, summary[key]])
        ws.cell(row=ws.max_row, column=1).font = bold

    ws.append([])
    ws.append(['Generated:', format_export_date(today)])
    ws.cell(row=ws.max_row, column=1).font = bold
    ws.column_dimensions['A'].width = 20
    ws.column_dimensions['B'].width = 30

    # === COMPLETED SHEET ===
    completed_ws = wb.create_sheet('Completed Vaccinations')
    _write_table(
        completed_ws,
        [('Vaccine Name', 25), ('Age (Days)', 12), ('Scheduled Date', 15),
         ('Completed Date', 15), ('Actual Cost', 12), ('Notes', 40)],
        [
            [v.vaccine_name, v.age_in_days, format_export_date(v.scheduled_date),
             format_export_date(v.completed_date), _money(v.actual_cost), v.notes or '-']
            for v in groups['completed']
        ],
        header_font,
        PatternFill(start_color='70AD47', end_color='70AD47', fill_type='solid'),
    )

    # === UPCOMING SHEET ===
    upcoming_ws = wb.create_sheet('Upcoming Vaccinations')
    _write_table(
        upcoming_ws,
        [('Vaccine Name', 25), ('Age (Days)', 12), ('Scheduled Date', 15), ('Status', 12), ('Notes', 40)],
        [
            [v.vaccine_name, v.age_in_days, format_export_date(v.scheduled_date),
             export_status_label(v, today), v.notes or '-']
            for v in groups['upcoming']
        ],
        header_font,
        PatternFill(start_color='FFC000', end_color='FFC000', fill_type='solid'),
    )

    return wb


def _write_table(ws, columns, rows, header_font, header_fill):
    ws.append([title for title, _ in columns])
    for index, (_, width) in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=index)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center', vertical='center')
        ws.column_dimensions[cell.column_letter].width = width

    stripe = PatternFill(start_color='F2F2F2', end_color='F2F2F2', fill_type='solid')
    for row in rows:
        ws.append(row)
        if ws.max_row % 2 == 0:
            for cell in ws[ws.max_row]:
                cell.fill = stripe


def vaccination_workbook_bytes(batch, vaccinations: List, today: Optional[date] = None) -> bytes:
    output = io.BytesIO()
    build_vaccination_workbook(batch, vaccinations, today).save(output)
    return output.getvalue()


# =============================================================================
# PDF
# =============================================================================

def vaccination_pdf_bytes(batch, vaccinations: List, today: Optional[date] = None) -> bytes:
    today = today or local_today()
    groups = categorize_vaccines(vaccinations)
    summary = vaccination_summary(vaccinations, today)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1.5*cm,
        leftMargin=1.5*cm,
        topMargin=1.5*cm,
        bottomMargin=1.5*cm
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReportTitle',
        parent=styles['Heading1'],
        fontSize=18,
        alignment=TA_CENTER,
        spaceAfter=12
    )
    heading_style = ParagraphStyle(
        'ReportHeading',
        parent=styles['Heading2'],
        fontSize=13,
        textColor=colors.HexColor('#2E7D32'),
        spaceAfter=8,
        spaceBefore=12
    )

    elements = [
        Paragraph('Vaccination Report', title_style),
        Paragraph(f"Generated: {format_export_date(today)}",
                  ParagraphStyle('Generated', parent=styles['Normal'], alignment=TA_CENTER)),
        Spacer(1, 12),
        HRFlowable(width='100%', thickness=1, color=colors.HexColor('#2E7D32')),
        Paragraph('Batch Information', heading_style),
    ]

    info_table = Table(_batch_rows(batch), colWidths=[5*cm, 10*cm])
    info_table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    elements.append(info_table)

    elements.append(Paragraph('Vaccination Summary', heading_style))
    elements.append(Table([
        ['Total', 'Completed', 'Upcoming', 'Overdue'],
        [str(summary['total']), str(summary['completed']), str(summary['upcoming']), str(summary['overdue'])],
    ], colWidths=[4*cm] * 4, style=_grid_style('#2E7D32')))

    elements.append(Paragraph('Completed Vaccinations', heading_style))
    if groups['completed']:
        rows = [['Vaccine', 'Age (Days)', 'Scheduled', 'Completed', 'Cost']]
        rows += [
            [v.vaccine_name, str(v.age_in_days), format_export_date(v.scheduled_date),
             format_export_date(v.completed_date), _money(v.actual_cost)]
            for v in groups['completed']
        ]
        elements.append(Table(rows, repeatRows=1, style=_grid_style('#70AD47')))
    else:
        elements.append(Paragraph('No completed vaccinations yet.', styles['Normal']))

    elements.append(Paragraph('Upcoming Vaccinations', heading_style))
    if groups['upcoming']:
        rows = [['Vaccine', 'Age (Days)', 'Scheduled', 'Status']]
        rows += [
            [v.vaccine_name, str(v.age_in_days), format_export_date(v.scheduled_date),
             export_status_label(v, today)]
            for v in groups['upcoming']
        ]
        elements.append(Table(rows, repeatRows=1, style=_grid_style('#FFC000')))
    else:
        elements.append(Paragraph('No upcoming vaccinations.', styles['Normal']))

    doc.build(elements)
    return buffer.getvalue()


def _grid_style(header_color: str) -> TableStyle:
    return TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor(header_color)),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
        ('TOPPADDING', (0, 0), (-1, -1), 5),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
    ])
