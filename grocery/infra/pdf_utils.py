import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from grocery.utilities.constants import COMPLETED_DEPARTMENT, PLAIN_TEXT_TITLE


def generate_pdf_for_list(grocery_list):
    """Generate a printable PDF table: Department / Item / Quantity for every unchecked item."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=A4,
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(PLAIN_TEXT_TITLE.title(), styles["Title"]),
        Spacer(1, 16),
    ]

    data = [["Department", "Item", "Quantity"]]
    for section in grocery_list.sections:
        if section.name == COMPLETED_DEPARTMENT:
            continue
        first = True
        for item in section.items:
            if item.is_checked:
                continue
            data.append([section.name if first else "", item.name, item.quantity or "-"])
            first = False

    if len(data) == 1:
        elements.append(Paragraph("Nothing left to buy.", styles["Normal"]))
    else:
        table = Table(data, repeatRows=1, colWidths=[150, 250, 120])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
            ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
            ("ALIGN", (0,0), (-1,-1), "LEFT"),
            ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
            ("FONTSIZE", (0,0), (-1,0), 12),
            ("BOTTOMPADDING", (0,0), (-1,0), 10),
            ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
        ]))
        elements.append(table)
    doc.build(elements)
    return buf.getvalue()
