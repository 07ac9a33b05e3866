"""Plain-text prompts and replies for the dialogue flows."""

from manualbot.app.models.common import InquiryType

CANCEL_HINT = "\n\n🚫 中断する場合は「キャンセル」と入力してください。"

EMAIL_EXAMPLE = "yamada@company.com"
NAME_EXAMPLE = "山田太郎"
INQUIRY_EXAMPLE = "経費精算の承認が遅れているようですが、通常どのくらいかかりますか？"

INQUIRY_MENU = "1️⃣ 質問・疑問\n2️⃣ 要望・改善提案\n3️⃣ 不具合報告\n4️⃣ その他"


def registration_email_prompt() -> str:
    return (
        "👋 業務マニュアルBotへようこそ！\n\n"
        "ご利用にはユーザー登録が必要です。\n\n"
        f"📧 まず、メールアドレスをお教えください。\n\n例: {EMAIL_EXAMPLE}" + CANCEL_HINT
    )


def registration_restart_prompt() -> str:
    return (
        "🔄 登録をやり直します。\n\n"
        f"📧 メールアドレスから再度入力してください。\n\n例: {EMAIL_EXAMPLE}" + CANCEL_HINT
    )


def registration_name_prompt(fields: dict[str, str]) -> str:
    return (
        f"✅ メールアドレス: {fields.get('email', '')}\n\n"
        f"続いて、お名前をお教えください。\n\n例: {NAME_EXAMPLE}" + CANCEL_HINT
    )


def registration_confirm_prompt(fields: dict[str, str]) -> str:
    return (
        "📋 入力内容をご確認ください\n\n"
        f"📧 メールアドレス:\n{fields.get('email', '')}\n\n"
        f"👤 お名前:\n{fields.get('name', '')}\n\n"
        "✅ 上記の内容で登録する場合は「はい」\n"
        "❌ 修正する場合は「いいえ」\n\nと入力してください。" + CANCEL_HINT
    )


def registration_completed(name: str) -> str:
    return (
        f"🎉 登録完了！\n\nようこそ、{name}さん！\n"
        "📚 マニュアル検索: キーワードを入力してください\n"
        "📋 使い方: 「ヘルプ」と入力"
    )


def registration_failed() -> str:
    return (
        "❌ 申し訳ございません。\n\n登録処理でエラーが発生しました。\n"
        "しばらく経ってから再度お試しください。\n\n"
        "🔄 再度登録する場合は「登録」と入力してください。"
    )


def inquiry_type_prompt(fields: dict[str, str], timeout_minutes: int = 10) -> str:
    return (
        "📝 問い合わせを開始します\n\n"
        "どのような内容でしょうか？\n番号を選択してください。\n\n"
        f"{INQUIRY_MENU}\n\n📋 番号（1〜4）を入力してください。\n\n"
        f"⏰ {timeout_minutes}分でタイムアウトします。" + CANCEL_HINT
    )


def inquiry_content_prompt(fields: dict[str, str], min_length: int, max_length: int) -> str:
    type_name = InquiryType(fields["inquiry_type"]).display_name
    return (
        f"✅ 「{type_name}」を選択しました。\n\n"
        "📝 具体的な内容をお聞かせください。\n\n"
        f"• {min_length}文字以上\n• {max_length}文字以内\n\n例:\n「{INQUIRY_EXAMPLE}」" + CANCEL_HINT
    )


def inquiry_rewrite_prompt() -> str:
    return "🔄 内容を修正します。\n\n📝 修正した内容を入力してください。" + CANCEL_HINT


def inquiry_confirm_prompt(fields: dict[str, str]) -> str:
    type_name = InquiryType(fields["inquiry_type"]).display_name
    return (
        "📋 内容を確認してください\n\n"
        f"📝 種類: {type_name}\n\n💬 内容:\n{fields.get('content', '')}\n\n"
        "✅ 送信する場合は「はい」\n❌ 修正する場合は「いいえ」\n\nと入力してください。"
        + CANCEL_HINT
    )


def inquiry_completed(type_name: str, inquiry_id: str) -> str:
    return (
        "✅ 問い合わせを送信しました！\n\n"
        f"📝 種類: {type_name}\n📋 受付番号: {inquiry_id}\n\n"
        "📧 回答は管理者が確認後、ご連絡いたします。\n\n"
        "🔍 引き続きマニュアル検索もご利用いただけます。"
    )


def inquiry_failed() -> str:
    return (
        "❌ 申し訳ございません。\n\n問い合わせの送信でエラーが発生しました。\n"
        "しばらく経ってから再度お試しください。\n\n"
        "🔄 再度問い合わせする場合は「問い合わせ」と入力してください。"
    )


def invalid_input(reason: str, example: str | None) -> str:
    text = f"❌ {reason}\n\n正しい形式で再度入力してください。"
    if example:
        text += f"\n\n例: {example}"
    return text + CANCEL_HINT


def duplicate_email(example: str) -> str:
    return (
        "⚠️ このメールアドレスは既に登録されています。\n\n"
        f"別のメールアドレスを入力するか、管理者にお問い合わせください。\n\n例: {example}"
        + CANCEL_HINT
    )


def unclear_confirmation(yes_label: str) -> str:
    return (
        "❓ 「はい」または「いいえ」で回答してください。\n\n"
        f"✅ {yes_label}: はい\n❌ 修正する: いいえ" + CANCEL_HINT
    )


def cancelled() -> str:
    return "🚫 手続きを中断しました。\n\nキーワードを入力するとマニュアルを検索できます。"


def session_expired() -> str:
    return (
        "⏰ 前回の手続きは有効期限が切れたため終了しました。\n\n"
        "もう一度最初からお試しください。"
    )


# Outside any flow


def registration_required() -> str:
    return (
        "👋 業務マニュアルBotへようこそ！\n\n"
        "ご利用にはユーザー登録が必要です。\n\n"
        "🚀 「登録」と入力して登録を開始してください。"
    )


def already_registered(name: str) -> str:
    return f"✅ {name}さんは既に登録済みです。\n\nキーワードを入力するとマニュアルを検索できます。"


def help_text() -> str:
    return (
        "【ヘルプ】\n\n"
        "🔍 マニュアル検索\n• キーワード入力で検索\n• 「経理」「人事」などカテゴリ名でも検索可能\n\n"
        "📁 カテゴリ一覧\n「カテゴリ」と入力\n\n"
        "📋 使い方\n「使い方」と入力\n\n"
        "❓ 困った時は\n「問い合わせ」と入力\n\n"
        "例: 有給申請、パスワード変更、経理"
    )


def usage_text() -> str:
    return (
        "【使い方】\n\n"
        "1️⃣ 調べたいことをキーワードで入力します（2文字以上）\n"
        "2️⃣ 検索結果からマニュアルのタイトルを入力すると詳細を表示します\n"
        "3️⃣ 「経理」「人事」などカテゴリ名でそのカテゴリの一覧を表示します\n\n"
        "💡 見つからない場合は「問い合わせ」から管理者へご連絡ください。"
    )


def menu_text(name: str) -> str:
    return (
        f"📋 メニュー（{name}さん）\n\n"
        "🔍 キーワードを入力 → マニュアル検索\n"
        "📁 「カテゴリ」 → カテゴリ一覧\n"
        "❓ 「問い合わせ」 → 管理者へ問い合わせ\n"
        "📖 「ヘルプ」 → ヘルプ"
    )


def nothing_to_cancel() -> str:
    return "ℹ️ 現在進行中の手続きはありません。"


def invalid_query(reason: str) -> str:
    return f"❌ {reason}\n\n例: 経費精算、有給申請、パスワード"


def no_results(query: str) -> str:
    return (
        f"🔍 「{query}」に一致するマニュアルは見つかりませんでした。\n\n"
        "💡 別のキーワードを試すか、「カテゴリ」で一覧をご確認ください。\n"
        "❓ 解決しない場合は「問い合わせ」と入力してください。"
    )


def service_unavailable() -> str:
    return (
        "❌ 申し訳ございません。\n\n現在サービスを利用できません。\n"
        "しばらく経ってから再度お試しください。"
    )
