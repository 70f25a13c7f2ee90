"""
Email Notifier - One failure digest per pass
"""

import asyncio
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo

import structlog

from parcelsync.core.config import Settings, settings as default_settings
from parcelsync.models import Domain, Record

logger = structlog.get_logger(__name__)


class EmailNotifier:
    """
    Sends the list of records that exhausted their retries.

    Delivery problems are logged and swallowed: a lost notification
    must never fail the pass that produced it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        smtp_factory: Callable[..., smtplib.SMTP] = smtplib.SMTP,
        now: Optional[Callable[[], datetime]] = None
    ):
        self.settings = settings or default_settings
        self._smtp_factory = smtp_factory
        self._now = now or (lambda: datetime.now(ZoneInfo(self.settings.NOTIFICATION_TIMEZONE)))

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.SMTP_SERVER and self.settings.EMAIL_ADDRESS)

    def build_message(self, domain: Domain, records: List[Record]) -> MIMEMultipart:
        """Compose the plain-text and HTML digest"""
        label = domain.label
        max_attempts = self.settings.MAX_RETRY_ATTEMPTS
        occurred_at = self._now().strftime("%Y-%m-%d %H:%M:%S")
        service_url = self.settings.SERVICE_URL

        msg = MIMEMultipart("alternative")
        msg["Subject"] = f"[{label} 서비스] {len(records)}개 레코드 처리 실패"
        msg["From"] = self.settings.EMAIL_ADDRESS
        msg["To"] = ", ".join(self.settings.get_notification_recipients())

        lines = "\n".join(f"- {record.address} (레코드 ID: {record.id})" for record in records)
        text = f"""
다음 {label} 레코드들이 {max_attempts}회 재시도 후에도 처리에 실패했습니다:

{lines}

총 실패 레코드: {len(records)}개
발생 시각: {occurred_at}

조치 필요:
1. 에어테이블에서 해당 레코드의 주소 정보 확인
2. 주소 정보가 올바른지 확인
3. 필요시 수동으로 정보 입력

서비스 관리: {service_url}
"""

        items = "".join(
            f"<li>{escape(record.address)} <small>(레코드 ID: {escape(record.id)})</small></li>"
            for record in records
        )
        html = f"""
<h2>{label} 정보 수집 실패 알림</h2>
<p>다음 {label} 레코드들이 <strong>{max_attempts}회 재시도</strong> 후에도 처리에 실패했습니다:</p>
<ul>{items}</ul>
<p><strong>총 실패 레코드:</strong> {len(records)}개</p>
<p><strong>발생 시각:</strong> {occurred_at}</p>
<h3>조치 필요</h3>
<ol>
<li>에어테이블에서 해당 레코드의 주소 정보 확인</li>
<li>주소 정보가 올바른지 확인</li>
<li>필요시 수동으로 정보 입력</li>
</ol>
<p><a href="{escape(service_url)}">서비스 관리 페이지</a></p>
"""

        msg.attach(MIMEText(text, "plain", "utf-8"))
        msg.attach(MIMEText(html, "html", "utf-8"))
        return msg

    def _send(self, msg: MIMEMultipart) -> None:
        server = self._smtp_factory(self.settings.SMTP_SERVER, self.settings.SMTP_PORT)
        try:
            # 587 speaks STARTTLS
            server.starttls()
            if self.settings.EMAIL_PASSWORD:
                server.login(self.settings.EMAIL_ADDRESS, self.settings.EMAIL_PASSWORD)
            server.sendmail(
                self.settings.EMAIL_ADDRESS,
                self.settings.get_notification_recipients(),
                msg.as_string()
            )
        finally:
            server.quit()

    async def notify(self, domain: Domain, records: List[Record]) -> bool:
        """Send one digest for ``records``; returns whether mail went out"""
        if not records:
            return False
        if not self.is_configured:
            logger.warning("SMTP not configured, failure notification skipped",
                           domain=domain.value, records=len(records))
            return False

        msg = self.build_message(domain, records)
        try:
            await asyncio.to_thread(self._send, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failure notification could not be sent", domain=domain.value, error=str(e))
            return False

        logger.info("Failure notification sent", domain=domain.value, records=len(records))
        return True
