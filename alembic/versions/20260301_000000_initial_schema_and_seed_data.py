"""Initial schema and seed data for Warden

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

This is the initial migration that creates all tables for the Warden
service and seeds the starter roleplay content. This includes:
- Accounts, character sheets, memories and channel mappings
- Discord guild settings, lore and prompt schedules
- Character stats and the activity feed
- Knowledge base, documents, stored files and system settings
- Default roleplay prompts and character tropes

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime, timezone
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

BIOGRAPHY_COLUMNS = [
    "full_name",
    "titles",
    "species",
    "age_description",
    "cultural_background",
    "pronouns",
    "gender_identity",
    "sexuality",
    "occupation",
    "current_location",
    "current_goal",
    "long_term_desire",
    "core_motivation",
    "deepest_fear",
    "core_belief",
    "moral_code",
    "personality_one_sentence",
    "key_virtues",
    "key_flaws",
    "speech_style",
    "physical_presence",
    "identifying_traits",
    "clothing_aesthetic",
    "origin",
    "greatest_success",
    "greatest_failure",
    "important_relationships",
    "rival",
    "affiliated_groups",
    "public_facade",
    "hidden_aspect",
    "secret",
    "legacy",
]

SEED_PROMPTS = {
    "character": [
        "Describe a childhood memory that shaped your character's worldview.",
        "What does your character do when no one is watching?",
        "Your character receives a letter from their past. What does it say?",
        "Describe your character's morning routine.",
        "What secret does your character keep from the party?",
        "Your character meets their younger self. What do they say?",
        "Describe a moment when your character felt truly afraid.",
        "What does your character value more: loyalty or truth?",
    ],
    "world": [
        "Describe the local tavern and its most interesting patron.",
        "What legend do children in this region tell around campfires?",
        "Describe the smell and sounds of the marketplace at dawn.",
        "What ancient ruins lie hidden in the nearby wilderness?",
        "Describe a local festival and what it celebrates.",
        "What dark secret does this town's mayor hide?",
    ],
    "combat": [
        "Describe how your character reacts when ambushed.",
        "Your character's weapon breaks mid-combat. What do they do?",
        "Describe your character's fighting stance and style.",
        "Your ally falls in battle. How does your character respond?",
        "Describe the moment before your character strikes the killing blow.",
    ],
    "social": [
        "Your character must convince a guard to let them pass. How?",
        "Describe how your character flirts (or fails to).",
        "Your character insults a noble at a party. What happens?",
        "Describe your character's reaction to being lied to.",
        "How does your character comfort a grieving stranger?",
    ],
    "plot": [
        "A mysterious hooded figure has been following the party. Who are they?",
        "An old enemy offers to help with the current quest. Why?",
        "The party discovers their quest was based on a lie. What was it?",
        "A prophecy mentions one of the party members by name. What does it say?",
        "The villain offers to spare the party if they betray one member. What happens?",
    ],
}

SEED_TROPES = [
    (
        "The Reluctant Hero",
        "Thrust into adventure against their will, but rises to the occasion when it matters most.",
        "archetype",
    ),
    (
        "The Mentor with a Dark Past",
        "Wise and experienced, but haunted by mistakes that shaped who they became.",
        "archetype",
    ),
    (
        "The Comic Relief with Hidden Depths",
        "Jokes and makes light of danger, but reveals profound wisdom in critical moments.",
        "archetype",
    ),
    ("The Stoic Warrior", "Few words, strong convictions. Actions speak louder than speeches.", "archetype"),
    (
        "From Enemies to Allies",
        "Two characters who started as rivals slowly develop mutual respect and friendship.",
        "dynamic",
    ),
    (
        "The Chosen One Who Doesn't Want It",
        "Prophecy marks them as special, but they'd rather live a normal life.",
        "archetype",
    ),
    ("The Betrayal", "A trusted ally reveals they've been working against the party all along.", "plot"),
    (
        "The Impossible Choice",
        "Must choose between two equally important things - both cannot be saved.",
        "situation",
    ),
    ("Dark Secret Revealed", "A character's hidden past comes to light at the worst possible moment.", "plot"),
    ("The Sacrifice Play", "A character chooses to give something precious to save others.", "situation"),
]


def upgrade() -> None:
    """Create all tables and seed initial data."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("discord_user_id", sa.String(255), nullable=True),
        sa.Column("storage_quota_bytes", sa.BigInteger(), nullable=False, server_default=str(1024 * 1024 * 1024)),
        sa.Column("storage_used_bytes", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_username", "username", unique=True),
        sa.Index("ix_users_discord_user_id", "discord_user_id", unique=True),
    )

    # Create character_sheets table
    op.create_table(
        "character_sheets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        *[
            sa.Column(ability, sa.Integer(), nullable=False, server_default="10")
            for ability in ("strength", "dexterity", "constitution", "intelligence", "wisdom", "charisma")
        ],
        sa.Column("character_class", sa.String(100), nullable=True),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("race", sa.String(100), nullable=True),
        sa.Column("alignment", sa.String(50), nullable=True),
        sa.Column("deity", sa.String(100), nullable=True),
        sa.Column("size", sa.String(20), nullable=False, server_default="Medium"),
        sa.Column("current_hp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_hp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("temp_hp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("armor_class", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("touch_ac", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("flat_footed_ac", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("initiative", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("speed", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("base_attack_bonus", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cmb", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cmd", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("fortitude_save", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("reflex_save", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("will_save", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("weapons", sa.JSON(), nullable=False),
        sa.Column("armor", sa.JSON(), nullable=False),
        sa.Column("feats", sa.JSON(), nullable=False),
        sa.Column("special_abilities", sa.JSON(), nullable=False),
        sa.Column("spells", sa.JSON(), nullable=False),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        *[sa.Column(column, sa.Text(), nullable=True) for column in BIOGRAPHY_COLUMNS],
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("public_slug", sa.String(255), nullable=True),
        sa.Column("public_views", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("public_slug"),
        sa.Index("ix_character_sheets_user_id", "user_id"),
    )

    # Create character_memories table
    op.create_table(
        "character_memories",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("character_id", sa.Integer(), nullable=False),
        sa.Column("guild_id", sa.String(255), nullable=False),
        sa.Column("memory", sa.Text(), nullable=False),
        sa.Column("added_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["character_id"], ["character_sheets.id"], ondelete="CASCADE"),
        sa.Index("ix_character_memories_character_id", "character_id"),
    )

    # Create channel_character_mappings table
    op.create_table(
        "channel_character_mappings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("channel_id", sa.String(255), nullable=False),
        sa.Column("guild_id", sa.String(255), nullable=False),
        sa.Column("character_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["character_id"], ["character_sheets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.Index("ix_channel_character_mappings_channel_id", "channel_id"),
    )

    # Create bot_settings table
    op.create_table(
        "bot_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("guild_id", sa.String(255), nullable=False),
        sa.Column("announcement_channel_id", sa.String(255), nullable=True),
        sa.Column("daily_prompt_enabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("daily_prompt_channel_id", sa.String(255), nullable=True),
        sa.Column("daily_prompt_time", sa.String(8), nullable=False, server_default="09:00:00"),
        sa.Column("last_prompt_posted", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_bot_settings_guild_id", "guild_id", unique=True),
    )

    # Create prompts table
    op.create_table(
        "prompts",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("prompt_text", sa.Text(), nullable=False),
        sa.Column("use_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_used", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="SET NULL"),
        sa.Index("ix_prompts_category", "category"),
    )

    # Create tropes table
    op.create_table(
        "tropes",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False),
        sa.Column("use_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_tropes_category", "category"),
    )

    # Create prompt_schedule table
    op.create_table(
        "prompt_schedule",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("guild_id", sa.String(255), nullable=False),
        sa.Column("channel_id", sa.String(255), nullable=False),
        sa.Column("schedule_time", sa.String(8), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_prompt_schedule_guild_id", "guild_id"),
    )

    # Create lore_entries table
    op.create_table(
        "lore_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("guild_id", sa.String(255), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("tag", sa.String(100), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.Index("ix_lore_entries_guild_id", "guild_id"),
        sa.Index("ix_lore_entries_tag", "tag"),
    )

    # Create channel_lore_tags table
    op.create_table(
        "channel_lore_tags",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("guild_id", sa.String(255), nullable=False),
        sa.Column("channel_id", sa.String(255), nullable=False),
        sa.Column("tag", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("guild_id", "channel_id", name="uq_channel_lore_tags_guild_channel"),
    )

    # Create character_stats table
    op.create_table(
        "character_stats",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("character_id", sa.Integer(), nullable=False),
        sa.Column("guild_id", sa.String(255), nullable=False),
        sa.Column("total_messages", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_dice_rolls", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("nat20_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("nat1_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_damage_dealt", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_active", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["character_id"], ["character_sheets.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("character_id", "guild_id", name="uq_character_stats_character_guild"),
        sa.Index("ix_character_stats_character_id", "character_id"),
    )

    # Create activity_feed table
    op.create_table(
        "activity_feed",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("character_id", sa.Integer(), nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["character_id"], ["character_sheets.id"], ondelete="CASCADE"),
        sa.Index("ix_activity_feed_character_id", "character_id"),
        sa.Index("ix_activity_feed_timestamp", "timestamp"),
    )

    # Create knowledge_base table
    op.create_table(
        "knowledge_base",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("guild_id", sa.String(255), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("answer", sa.Text(), nullable=False),
        sa.Column("answer_html", sa.Text(), nullable=True),
        sa.Column("source_url", sa.String(1024), nullable=True),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("ai_generated", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_by", sa.String(255), nullable=True),
        sa.Column("upvotes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_knowledge_base_guild_id", "guild_id"),
        sa.Index("ix_knowledge_base_category", "category"),
    )

    # Create documents table
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("is_folder", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("mime_type", sa.String(255), nullable=True),
        sa.Column("size", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["documents.id"], ondelete="CASCADE"),
        sa.Index("ix_documents_user_id", "user_id"),
        sa.Index("ix_documents_parent_id", "parent_id"),
    )

    # Create files table
    op.create_table(
        "files",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("original_file_name", sa.String(255), nullable=False),
        sa.Column("mime_type", sa.String(255), nullable=False),
        sa.Column("file_size", sa.BigInteger(), nullable=False),
        sa.Column("s3_key", sa.String(1024), nullable=False),
        sa.Column("s3_bucket", sa.String(255), nullable=False),
        sa.Column("document_id", sa.Integer(), nullable=True),
        sa.Column("virus_scan_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("uploaded_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("s3_key"),
        sa.Index("ix_files_user_id", "user_id"),
    )

    # Create system_settings table
    op.create_table(
        "system_settings",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("key", sa.String(255), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_system_settings_key", "key", unique=True),
    )

    # Seed starter prompts and tropes
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    prompts_table = sa.table(
        "prompts",
        sa.column("category", sa.String),
        sa.column("prompt_text", sa.Text),
        sa.column("use_count", sa.Integer),
        sa.column("created_at", sa.DateTime),
    )
    op.bulk_insert(
        prompts_table,
        [
            {"category": category, "prompt_text": text, "use_count": 0, "created_at": now}
            for category, texts in SEED_PROMPTS.items()
            for text in texts
        ],
    )

    tropes_table = sa.table(
        "tropes",
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("category", sa.String),
        sa.column("use_count", sa.Integer),
        sa.column("created_at", sa.DateTime),
    )
    op.bulk_insert(
        tropes_table,
        [
            {"name": name, "description": description, "category": category, "use_count": 0, "created_at": now}
            for name, description, category in SEED_TROPES
        ],
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("system_settings")
    op.drop_table("files")
    op.drop_table("documents")
    op.drop_table("knowledge_base")
    op.drop_table("activity_feed")
    op.drop_table("character_stats")
    op.drop_table("channel_lore_tags")
    op.drop_table("lore_entries")
    op.drop_table("prompt_schedule")
    op.drop_table("tropes")
    op.drop_table("prompts")
    op.drop_table("bot_settings")
    op.drop_table("channel_character_mappings")
    op.drop_table("character_memories")
    op.drop_table("character_sheets")
    op.drop_table("users")
