"""add_rls_policies

Revision ID: b7e3a95d0f12
Revises: 4c1d8e2f7a90
Create Date: 2026-10-12 09:41:03.502117

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "b7e3a95d0f12"
down_revision: str | Sequence[str] | None = "4c1d8e2f7a90"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

WORKSPACE_TABLES = ["tasks", "tags", "workspace_invites", "activity_log"]
TASK_CHILD_TABLES = ["task_tags", "subtasks", "comments", "attachments"]


def upgrade() -> None:
    """Add Row Level Security policies for workspace-scoped tables.

    The API connects with a service account that bypasses RLS; the service
    layer does its own role checks. These policies cover direct Supabase
    client connections.
    """
    # Membership lookup that does not trigger RLS on workspace_members itself
    op.execute("""
        CREATE OR REPLACE FUNCTION get_user_workspace_ids(uid UUID)
        RETURNS SETOF UUID
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT workspace_id FROM workspace_members WHERE user_id = uid;
        $$;
    """)

    for table in ["workspaces", "workspace_members", *WORKSPACE_TABLES, *TASK_CHILD_TABLES]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Workspaces ---
    op.execute("""
        CREATE POLICY workspace_select ON workspaces
            FOR SELECT USING (
                id IN (SELECT get_user_workspace_ids((SELECT auth.uid())))
            );
    """)
    op.execute("""
        CREATE POLICY workspace_insert ON workspaces
            FOR INSERT WITH CHECK (
                (SELECT auth.uid()) IS NOT NULL
            );
    """)
    op.execute("""
        CREATE POLICY workspace_update ON workspaces
            FOR UPDATE USING (
                id IN (
                    SELECT workspace_id FROM workspace_members
                    WHERE user_id = (SELECT auth.uid())
                    AND role IN ('owner', 'admin')
                )
            );
    """)
    op.execute("""
        CREATE POLICY workspace_delete ON workspaces
            FOR DELETE USING (
                id IN (
                    SELECT workspace_id FROM workspace_members
                    WHERE user_id = (SELECT auth.uid())
                    AND role = 'owner'
                )
            );
    """)

    # --- Workspace members ---
    op.execute("""
        CREATE POLICY member_select ON workspace_members
            FOR SELECT USING (
                workspace_id IN (SELECT get_user_workspace_ids((SELECT auth.uid())))
            );
    """)
    op.execute("""
        CREATE POLICY member_modify ON workspace_members
            FOR ALL USING (
                workspace_id IN (
                    SELECT workspace_id FROM workspace_members
                    WHERE user_id = (SELECT auth.uid())
                    AND role IN ('owner', 'admin')
                )
            );
    """)

    # --- Tables carrying workspace_id: members may read ---
    for table in WORKSPACE_TABLES:
        op.execute(f"""
            CREATE POLICY {table}_select ON {table}
                FOR SELECT USING (
                    workspace_id IN (SELECT get_user_workspace_ids((SELECT auth.uid())))
                );
        """)

    # --- Tables hanging off a task: scoped through the parent task ---
    for table in TASK_CHILD_TABLES:
        op.execute(f"""
            CREATE POLICY {table}_select ON {table}
                FOR SELECT USING (
                    task_id IN (
                        SELECT id FROM tasks
                        WHERE workspace_id IN (SELECT get_user_workspace_ids((SELECT auth.uid())))
                    )
                );
        """)


def downgrade() -> None:
    """Remove RLS policies and helper function."""
    for table in TASK_CHILD_TABLES + WORKSPACE_TABLES:
        op.execute(f"DROP POLICY IF EXISTS {table}_select ON {table};")

    op.execute("DROP POLICY IF EXISTS member_modify ON workspace_members;")
    op.execute("DROP POLICY IF EXISTS member_select ON workspace_members;")

    for policy in ["workspace_delete", "workspace_update", "workspace_insert", "workspace_select"]:
        op.execute(f"DROP POLICY IF EXISTS {policy} ON workspaces;")

    for table in ["workspaces", "workspace_members", *WORKSPACE_TABLES, *TASK_CHILD_TABLES]:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")

    op.execute("DROP FUNCTION IF EXISTS get_user_workspace_ids(UUID);")
