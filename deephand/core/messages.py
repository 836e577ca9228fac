"""
Japanese and English message tables for validation errors and API responses.
"""

from typing import Any, Dict, Optional

from .config import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES


VALIDATION_MESSAGES: Dict[str, Dict[str, str]] = {
    "ja": {
        "required": "この項目は必須です",
        "min_length": "{min_length}文字以上で入力してください",
        "max_length": "{max_length}文字以内で入力してください",
        "email_invalid": "有効なメールアドレスを入力してください",
        "consent_required": "プライバシーポリシーに同意してください",
        "invalid_choice": "選択肢から選んでください",
        "choice_required": "少なくとも1つ選択してください",
        "other_data_type_required": "その他のデータ種別を入力してください",
        "invalid_type": "入力形式が正しくありません",
    },
    "en": {
        "required": "This field is required",
        "min_length": "Please enter at least {min_length} characters",
        "max_length": "Please enter no more than {max_length} characters",
        "email_invalid": "Please enter a valid email address",
        "consent_required": "Please agree to the privacy policy",
        "invalid_choice": "Please choose one of the listed options",
        "choice_required": "Please select at least one option",
        "other_data_type_required": "Please describe the other data type",
        "invalid_type": "The value has an invalid format",
    },
}

RESPONSE_MESSAGES: Dict[str, Dict[str, str]] = {
    "ja": {
        "contact_success": "お問い合わせを受け付けました。担当者より3営業日以内にご連絡いたします。",
        "request_success": "データアノテーション依頼を受け付けました。24時間以内に詳細なご提案をお送りいたします。",
        "validation_failed": "入力内容に誤りがあります。各項目をご確認ください。",
        "malformed_body": "不正なリクエスト形式です。",
        "dispatch_failed": "メール送信に失敗しました。しばらくしてから再度お試しください。",
        "config_error": "メール送信設定に問題があります。管理者にお問い合わせください。",
        "server_error": "サーバーエラーが発生しました。しばらくしてから再度お試しください。",
        "network_error": "通信エラーが発生しました。ネットワーク接続をご確認のうえ再度お試しください。",
        "already_submitting": "送信中です。しばらくお待ちください。",
    },
    "en": {
        "contact_success": "Your inquiry has been received. Our team will contact you within 3 business days.",
        "request_success": "Your data annotation request has been received. We will send a detailed proposal within 24 hours.",
        "validation_failed": "Some fields are invalid. Please review the highlighted items.",
        "malformed_body": "The request could not be read.",
        "dispatch_failed": "We could not send your message. Please try again later.",
        "config_error": "Email delivery is not configured correctly. Please contact the site administrator.",
        "server_error": "A server error occurred. Please try again later.",
        "network_error": "A network error occurred. Please check your connection and try again.",
        "already_submitting": "Your submission is already being sent. Please wait.",
    },
}


def resolve_language(tag: Any, default: str = DEFAULT_LANGUAGE) -> str:
    """Map a language tag to a supported language, falling back to ``default``.

    Region subtags are ignored, so ``en-US`` resolves to ``en``.
    """
    if default not in SUPPORTED_LANGUAGES:
        default = DEFAULT_LANGUAGE
    if not isinstance(tag, str):
        return default
    primary = tag.strip().lower().replace("_", "-").split("-")[0]
    return primary if primary in SUPPORTED_LANGUAGES else default


def validation_message(code: str, language: str, context: Optional[Dict[str, Any]] = None) -> str:
    table = VALIDATION_MESSAGES[resolve_language(language)]
    template = table.get(code, table["invalid_type"])
    try:
        return template.format(**(context or {}))
    except (KeyError, IndexError):
        return template


def response_message(key: str, language: str) -> str:
    return RESPONSE_MESSAGES[resolve_language(language)][key]
