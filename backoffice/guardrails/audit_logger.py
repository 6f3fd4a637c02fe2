import io
import json
import logging
from typing import List, Optional

from backoffice.remote import remote
from backoffice.models.audit import FactorLog
from backoffice.models.factor import FACTOR_STATUS_DISPLAY_NAMES, FactorStatus
from backoffice.models.user import User

# ReportLab Imports
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet

logger = logging.getLogger(__name__)

class AuditLogger:
    """
    Read side of the factor-log trail.
    Entries are written by the remote API as part of each status update;
    this class only records the local audit line and projects the trail.
    """
    def __init__(self):
        pass

    def log_state_transition(self, factor_id: str, from_state: FactorStatus, to_state: FactorStatus, actor: User):
        logger.info(
            f"AUDIT [STATE_CHANGE]: factor {factor_id} {from_state.value} -> {to_state.value} "
            f"by user {actor.user_id} ({actor.role.value})"
        )

    async def get_audit_trail(self, factor_id: str, token: str) -> List[FactorLog]:
        """Log entries ordered by createdAt, oldest first."""
        return await remote.factor_logs.get_for_factor(factor_id, token)

    async def get_latest_entry(self, factor_id: str, token: str) -> Optional[FactorLog]:
        trail = await self.get_audit_trail(factor_id, token)
        return trail[-1] if trail else None

    async def generate_audit_report(self, factor_id: str, token: str, format: str = "PDF") -> bytes:
        """Render the trail as a PDF or JSON document."""
        events = await self.get_audit_trail(factor_id, token)

        if format.upper() == "PDF":
            return self._create_pdf(factor_id, events)
        elif format.upper() == "JSON":
            return json.dumps([e.model_dump(mode="json", by_alias=True) for e in events], indent=2, ensure_ascii=False).encode("utf-8")
        else:
            raise ValueError("Unsupported format")

    def _create_pdf(self, factor_id: str, events: List[FactorLog]) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=letter)
        styles = getSampleStyleSheet()
        story = []

        story.append(Paragraph(f"Factor Log: {factor_id}", styles['Title']))
        story.append(Spacer(1, 12))

        data = [["Timestamp", "Status", "Comment"]]

        for e in events:
            ts = e.created_at.strftime("%Y-%m-%d %H:%M:%S")
            comment = e.comment[:100] + ("..." if len(e.comment) > 100 else "")
            data.append([ts, e.status.value, comment])

        t = Table(data, colWidths=[110, 130, 290])
        t.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 12),
            ('BACKGROUND', (0, 1), (-1, -1), colors.beige),
            ('GRID', (0, 0), (-1, -1), 1, colors.black),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
        ]))

        story.append(t)
        doc.build(story)
        return buffer.getvalue()

def describe_entry(entry: FactorLog) -> str:
    label = FACTOR_STATUS_DISPLAY_NAMES[entry.status]
    return f"{label}: {entry.comment}" if entry.comment else label

audit_logger = AuditLogger()
