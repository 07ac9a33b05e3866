"""Plain-text rendering of search results, manual details and categories."""

from manualbot.app.models.manual import Manual, ScoredResult

PREVIEW_LENGTH = 50


def preview(body: str, length: int = PREVIEW_LENGTH) -> str:
    text = " ".join(body.split())
    if len(text) <= length:
        return text
    return text[:length] + "..."


def render_results(query: str, results: list[ScoredResult]) -> str:
    """Numbered result list with category, body preview and relevance."""
    lines = [f"🔍 「{query}」の検索結果（{len(results)}件）"]

    for i, result in enumerate(results, start=1):
        manual = result.document
        lines.append("")
        lines.append(f"{i}. {manual.title}")
        lines.append(f"   📁 {manual.category_path.label()}")
        if manual.body:
            lines.append(f"   {preview(manual.body)}")
        lines.append(f"   関連度: {round(result.score * 100)}%")

    lines.append("")
    lines.append("📖 タイトルを入力すると詳細を表示します。")
    return "\n".join(lines)


def render_category_results(category: str, results: list[ScoredResult]) -> str:
    if not results:
        return f"📁 {category}\n\nこのカテゴリで閲覧できるマニュアルはありません。"

    lines = [f"📁 {category}のマニュアル（{len(results)}件）", ""]
    lines.extend(f"{i}. {r.document.title}" for i, r in enumerate(results, start=1))
    lines.append("")
    lines.append("📖 タイトルを入力すると詳細を表示します。")
    return "\n".join(lines)


def render_detail(manual: Manual, related: list[ScoredResult]) -> str:
    """Full manual view followed by up to a few related titles."""
    lines = [f"📖 {manual.title}", f"📁 {manual.category_path.label()}", ""]

    if manual.body:
        lines.append(manual.body)
        lines.append("")
    if manual.tags:
        lines.append("🏷️ " + "、".join(sorted(manual.tags)))
    if manual.image_url:
        lines.append(f"🖼️ {manual.image_url}")
    if manual.video_url:
        lines.append(f"🎬 {manual.video_url}")
    if manual.updated_at:
        lines.append(f"🕒 最終更新: {manual.updated_at:%Y-%m-%d}")

    if related:
        lines.append("")
        lines.append("🔗 関連マニュアル")
        lines.extend(f"• {r.document.title}" for r in related)

    return "\n".join(lines).rstrip()


def render_categories(counts: dict[str, int]) -> str:
    if not counts:
        return "📁 閲覧できるマニュアルはありません。"

    lines = ["📁 カテゴリ一覧", ""]
    lines.extend(f"• {name}（{count}件）" for name, count in counts.items())
    lines.append("")
    lines.append("💡 カテゴリ名を入力するとそのカテゴリのマニュアルを表示します。")
    return "\n".join(lines)
