from fpdf import FPDF

from chefportal.services.docket_progress import DocketProgress
from chefportal.services.status_labels import StatusLabel


def _latin1(text: str) -> str:
    """fpdf built-in fonts are latin-1 only."""
    return text.encode("latin-1", errors="replace").decode("latin-1")


def generate_docket_summary_pdf(
    candidate_name: str,
    email: str | None,
    uid: str | None,
    progress: DocketProgress,
    label: StatusLabel,
    checklist: list[dict],
    generated_at: str,
) -> bytes:
    """One-page checklist of a candidate's docket for the admin file."""
    pdf = FPDF()
    pdf.set_margins(20, 20, 20)
    pdf.add_page()

    pdf.set_font("Helvetica", "B", 18)
    pdf.multi_cell(0, 10, _latin1(f"Document Docket: {candidate_name}"), align="L")
    pdf.ln(2)

    pdf.set_font("Helvetica", "", 11)
    pdf.set_text_color(80, 80, 80)
    if email:
        pdf.cell(0, 7, _latin1(f"Email: {email}"), new_x="LMARGIN", new_y="NEXT")
    if uid:
        pdf.cell(0, 7, _latin1(f"Candidate ID: {uid}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 7, _latin1(f"Generated: {generated_at}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(
        0, 7,
        _latin1(f"Progress: {progress.completed} of {progress.total} ({progress.percentage:.0f}%) - {label.label}"),
        new_x="LMARGIN", new_y="NEXT",
    )

    pdf.ln(3)
    pdf.set_draw_color(200, 200, 200)
    pdf.line(20, pdf.get_y(), 190, pdf.get_y())
    pdf.ln(5)

    pdf.set_font("Helvetica", "", 11)
    for item in checklist:
        if item["completed"]:
            pdf.set_text_color(0, 120, 40)
            mark = "[x]"
        else:
            pdf.set_text_color(180, 60, 0)
            mark = "[ ]"
        pdf.cell(0, 8, _latin1(f"{mark}  {item['label']}"), new_x="LMARGIN", new_y="NEXT")

    return bytes(pdf.output())
