"""Static category tables used by keyword scoring and category routing."""

# Major category -> keywords associated with it. A query that overlaps one of
# these earns the category contribution for manuals in that category.
CATEGORY_SYNONYMS: dict[str, tuple[str, ...]] = {
    "経理": ("経費", "精算", "会計", "請求", "支払い", "領収書"),
    "人事": ("有給", "休暇", "勤怠", "申請", "評価", "給与"),
    "IT": ("パスワード", "システム", "ソフト", "パソコン", "ネット"),
    "総務": ("備品", "施設", "会議室", "駐車場", "受付", "郵便"),
    "営業": ("見積", "契約", "顧客", "商談", "提案", "売上"),
    "製造": ("生産", "品質", "安全", "設備", "在庫", "出荷"),
}

# Exact inputs that mean "list this whole category"
CATEGORY_ALIASES: dict[str, tuple[str, ...]] = {
    "経理": ("経理", "けいり", "accounting"),
    "人事": ("人事", "じんじ", "hr", "human"),
    "IT": ("it", "システム", "パソコン", "pc"),
    "総務": ("総務", "そうむ", "general"),
    "営業": ("営業", "えいぎょう", "sales"),
    "製造": ("製造", "せいぞう", "manufacturing"),
}


def resolve_category_alias(text: str) -> str | None:
    """Return the major category whose alias equals text, if any."""
    folded = text.strip().casefold()
    if not folded:
        return None

    for category, aliases in CATEGORY_ALIASES.items():
        if any(folded == alias.casefold() for alias in aliases):
            return category

    return None
