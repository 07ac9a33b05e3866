"""Dev seeding helper - sample manuals for local runs."""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine

from manualbot.app.config import get_settings
from manualbot.app.db.engine import (
    create_async_engine_from_settings,
    create_schema,
    create_session_factory,
)
from manualbot.app.db.models import ManualRow
from manualbot.app.models.common import PermissionLevel
from manualbot.app.models.manual import CategoryPath, Manual
from manualbot.app.permissions import label_of


def _manual(
    manual_id: str,
    major: str,
    middle: str,
    title: str,
    body: str,
    tags: str,
    level: PermissionLevel = PermissionLevel.general,
) -> Manual:
    return Manual(
        id=manual_id,
        category_path=CategoryPath(major=major, middle=middle),
        title=title,
        body=body,
        tags=frozenset(tags.split(",")),
        required_permission=level,
    )


SAMPLE_MANUALS: list[Manual] = [
    _manual(
        "M001", "経理", "経費精算", "経費精算の手続き",
        "経費精算は月末までに申請してください。領収書の添付が必要です。承認は上司が行います。",
        "経費,精算,領収書,申請",
    ),
    _manual(
        "M002", "経理", "出張", "出張費申請ガイド",
        "出張費の申請は事前申請が原則です。宿泊費、交通費、日当の上限額を確認してください。",
        "出張,旅費,申請,宿泊",
    ),
    _manual(
        "M003", "経理", "請求書", "請求書処理フロー",
        "請求書は受領後3営業日以内に処理します。支払承認は部長以上が行います。",
        "請求書,支払,承認,処理",
        PermissionLevel.general_affairs,
    ),
    _manual(
        "M004", "人事", "休暇", "有給休暇申請方法",
        "有給休暇は1週間前までに申請してください。緊急時は口頭連絡後、書面で提出してください。",
        "有給,休暇,申請,休み",
    ),
    _manual(
        "M005", "人事", "評価", "人事評価制度について",
        "年2回の人事評価があります。目標設定と自己評価が重要です。",
        "評価,目標,査定,昇進",
        PermissionLevel.executive,
    ),
    _manual(
        "M006", "IT", "アカウント", "パスワード変更手順",
        "パスワードは3ヶ月ごとに変更してください。8文字以上で英数字記号を組み合わせてください。",
        "パスワード,セキュリティ,変更,ログイン",
    ),
    _manual(
        "M007", "IT", "ネットワーク", "VPN接続設定方法",
        "リモートワーク時はVPN接続が必須です。設定方法と接続手順を説明します。",
        "VPN,リモート,接続,在宅",
    ),
    _manual(
        "M008", "総務", "施設", "会議室予約方法",
        "会議室はシステムから予約してください。当日キャンセルは30分前までにお願いします。",
        "会議室,予約,システム,キャンセル",
    ),
    _manual(
        "M009", "営業", "契約", "契約書チェックポイント",
        "契約書は法務部門の確認が必要です。重要条項を必ずチェックしてください。",
        "契約,法務,チェック,条項",
        PermissionLevel.executive,
    ),
]


async def seed_sample_manuals(engine: AsyncEngine | None = None) -> int:
    """Seed sample manuals into the configured database.

    This function is idempotent - safe to run multiple times.

    Args:
        engine: Engine to seed; defaults to one built from settings and
            disposed afterwards

    Returns:
        Number of manuals inserted
    """
    owns_engine = engine is None
    if engine is None:
        engine = create_async_engine_from_settings(get_settings())
    await create_schema(engine)
    session_factory = create_session_factory(engine)

    created = 0
    async with session_factory() as session:
        existing = set((await session.execute(select(ManualRow.id))).scalars().all())

        for position, manual in enumerate(SAMPLE_MANUALS):
            if manual.id in existing:
                print(f"Manual already exists: {manual.id} {manual.title}")
                continue

            print(f"Creating manual {manual.id} {manual.title}...")
            created += 1
            session.add(
                ManualRow(
                    id=manual.id,
                    position=position,
                    major_category=manual.category_path.major,
                    middle_category=manual.category_path.middle,
                    minor_category=manual.category_path.minor,
                    title=manual.title,
                    body=manual.body,
                    view_permission=label_of(manual.required_permission),
                    tags=",".join(sorted(manual.tags)),
                    is_active=manual.active,
                )
            )

        await session.commit()

    if owns_engine:
        await engine.dispose()
    print(f"✅ Dev seeding complete ({created} created)")
    return created


if __name__ == "__main__":
    asyncio.run(seed_sample_manuals())
