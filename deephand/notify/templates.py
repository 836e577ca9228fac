"""
Email templates for contact and data-request notifications.

Rendering is a pure function of the submitted data and language: it returns a
subject plus HTML and plain-text bodies. Markup lives in the Jinja2 files under
``email_templates/``; HTML output is autoescaped, plain text is not.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from jinja2 import Environment, PackageLoader, select_autoescape

from ..core.messages import resolve_language

_env = Environment(
    loader=PackageLoader("deephand.notify", "email_templates"),
    autoescape=select_autoescape(),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)

CONTACT_ADMIN = "contact_admin"
CONTACT_ACK = "contact_ack"
REQUEST_ADMIN = "request_admin"
REQUEST_ACK = "request_ack"

TEMPLATE_KINDS = (CONTACT_ADMIN, CONTACT_ACK, REQUEST_ADMIN, REQUEST_ACK)

TRANSLATIONS: Dict[str, Dict[str, Any]] = {
    "ja": {
        "subjects": {
            CONTACT_ADMIN: "【DeepHand】新しいお問い合わせ: {name}",
            CONTACT_ACK: "【DeepHand】お問い合わせを受け付けました",
            REQUEST_ADMIN: "【DeepHand】新しいデータアノテーション依頼: {name}",
            REQUEST_ACK: "【DeepHand】データアノテーション依頼を受け付けました",
        },
        "titles": {
            CONTACT_ADMIN: "新しいお問い合わせがありました",
            CONTACT_ACK: "お問い合わせありがとうございます",
            REQUEST_ADMIN: "新しいデータアノテーション依頼がありました",
            REQUEST_ACK: "データアノテーション依頼ありがとうございます",
        },
        "intro": {
            CONTACT_ACK: [
                "{name} 様",
                "この度は、DeepHandにお問い合わせいただき、誠にありがとうございます。",
                "以下の内容でお問い合わせを受け付けました。",
            ],
            REQUEST_ACK: [
                "{name} 様",
                "この度は、DeepHandにデータアノテーションをご依頼いただき、誠にありがとうございます。",
                "以下の内容でご依頼を受け付けました。",
            ],
        },
        "closing": {
            CONTACT_ACK: ["担当者より3営業日以内にご連絡させていただきます。"],
            REQUEST_ACK: ["24時間以内に詳細なご提案をお送りいたします。"],
        },
        "labels": {
            "name": "お名前",
            "email": "メールアドレス",
            "company": "会社名",
            "organization": "ご所属",
            "subject": "件名",
            "message": "お問い合わせ内容",
            "backgroundPurpose": "背景・目的",
            "dataType": "データ種別",
            "otherDataType": "その他のデータ種別",
            "dataDetails": "データの詳細",
            "dataVolume": "データ量",
            "deadline": "希望納期",
            "budget": "予算",
            "otherRequirements": "その他のご要望",
            "requestId": "受付番号",
            "receivedAt": "受信日時",
        },
        "data_types": {
            "text": "テキストデータ",
            "image": "画像データ",
            "video": "動画データ",
            "audio": "音声データ",
            "sensor": "センサーデータ",
            "other": "その他",
        },
        "not_provided": "未入力",
        "footer": [
            "このメールは送信専用のメールアドレスから送信されています。",
            "お問い合わせはWebサイトのお問い合わせフォームをご利用ください。",
        ],
    },
    "en": {
        "subjects": {
            CONTACT_ADMIN: "[DeepHand] New Contact Inquiry: {name}",
            CONTACT_ACK: "[DeepHand] We have received your inquiry",
            REQUEST_ADMIN: "[DeepHand] New Data Annotation Request: {name}",
            REQUEST_ACK: "[DeepHand] Your data annotation request has been received",
        },
        "titles": {
            CONTACT_ADMIN: "New Contact Inquiry Received",
            CONTACT_ACK: "Thank You for Your Inquiry",
            REQUEST_ADMIN: "New Data Annotation Request Received",
            REQUEST_ACK: "Thank You for Your Request",
        },
        "intro": {
            CONTACT_ACK: [
                "Dear {name},",
                "Thank you for contacting DeepHand.",
                "We have received your inquiry with the following details:",
            ],
            REQUEST_ACK: [
                "Dear {name},",
                "Thank you for requesting data annotation from DeepHand.",
                "We have received your request with the following details:",
            ],
        },
        "closing": {
            CONTACT_ACK: ["Our team will contact you within 3 business days."],
            REQUEST_ACK: ["We will send you a detailed proposal within 24 hours."],
        },
        "labels": {
            "name": "Name",
            "email": "Email",
            "company": "Company",
            "organization": "Organization",
            "subject": "Subject",
            "message": "Message",
            "backgroundPurpose": "Background & Purpose",
            "dataType": "Data Types",
            "otherDataType": "Other Data Type",
            "dataDetails": "Data Details",
            "dataVolume": "Data Volume",
            "deadline": "Deadline",
            "budget": "Budget",
            "otherRequirements": "Other Requirements",
            "requestId": "Request ID",
            "receivedAt": "Received At",
        },
        "data_types": {
            "text": "Text Data",
            "image": "Image Data",
            "video": "Video Data",
            "audio": "Audio Data",
            "sensor": "Sensor Data",
            "other": "Other",
        },
        "not_provided": "Not provided",
        "footer": [
            "This email was sent from a notification-only address.",
            "Please use the contact form on our website for inquiries.",
        ],
    },
}

# Fields listed in each email, in display order
CONTACT_FIELDS = ("name", "email", "company", "subject", "message")
REQUEST_FIELDS = (
    "name", "organization", "email", "backgroundPurpose", "dataType", "otherDataType",
    "dataDetails", "dataVolume", "deadline", "budget", "otherRequirements",
)
# Multi-line free text rendered in a block instead of a table row
LONG_TEXT_FIELDS = ("message", "backgroundPurpose", "dataDetails", "otherRequirements")


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


def _fields_for(template_kind: str) -> Tuple[str, ...]:
    return CONTACT_FIELDS if template_kind in (CONTACT_ADMIN, CONTACT_ACK) else REQUEST_FIELDS


def _display_value(field: str, value: Any, table: Mapping[str, Any]) -> str:
    if value is None or value == "" or value == []:
        return table["not_provided"]
    if field == "dataType":
        values = value if isinstance(value, (list, tuple)) else [value]
        return ", ".join(table["data_types"].get(v, str(v)) for v in values)
    return str(value)


def _rows(template_kind: str, data: Mapping[str, Any], table: Mapping[str, Any]) -> List[Tuple[str, str, str]]:
    rows = []
    for field in _fields_for(template_kind):
        if field == "otherDataType" and not data.get(field):
            continue
        rows.append((field, table["labels"][field], _display_value(field, data.get(field), table)))
    return rows


def render(
    template_kind: str,
    data: Mapping[str, Any],
    language: str,
    site_url: str,
    request_id: Optional[str] = None,
    received_at: Optional[datetime] = None,
) -> RenderedEmail:
    """Render one email for ``template_kind``.

    ``data`` uses the wire field names (``backgroundPurpose``, ``dataType``...).
    Unsupported languages fall back to the site default.
    """
    if template_kind not in TEMPLATE_KINDS:
        raise ValueError(f"Unknown template kind: {template_kind}")

    language = resolve_language(language)
    table = TRANSLATIONS[language]
    name = str(data.get("name") or "")

    rows = _rows(template_kind, data, table)
    if request_id:
        rows.append(("requestId", table["labels"]["requestId"], request_id))
    if received_at is not None:
        rows.append(("receivedAt", table["labels"]["receivedAt"], received_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()))

    context = {
        "language": language,
        "title": table["titles"][template_kind],
        "intro": [line.format(name=name) for line in table["intro"].get(template_kind, [])],
        "closing": table["closing"].get(template_kind, []),
        "rows": rows,
        "long_text_fields": LONG_TEXT_FIELDS,
        "footer": table["footer"],
        "site_url": site_url,
    }
    return RenderedEmail(
        subject=table["subjects"][template_kind].format(name=name),
        html=_env.get_template("notification.html").render(context),
        text=_env.get_template("notification.txt").render(context),
    )
