# data/models.py

from pony.orm import Database, Optional, PrimaryKey, Required


def define_entities(db: Database):
    """
    Declare the Pony entities on `db` and return (Migration, SavedScript).

    Entities are declared per Database so every ScriptDatabase owns its
    own mapping instead of sharing a module-level one.
    """

    class Migration(db.Entity):
        """
        Tracks which migration scripts have been applied.
        """
        filename   = Required(str, unique=True)
        applied_at = Required(int, size=64)

    class SavedScript(db.Entity):
        """
        One script produced from a template. Column names follow the
        saved_scripts table shared with the remote copy.
        """
        _table_ = "saved_scripts"

        id            = PrimaryKey(int, auto=True)
        template_type = Required(str, column="templateType", autostrip=False)
        client_name   = Optional(str, column="clientName", autostrip=False, sql_default="''")
        form_data     = Optional(str, column="formData", autostrip=False, sql_default="'{}'")
        content       = Required(str, autostrip=False)
        created_at    = Required(int, size=64, column="createdAt")
        updated_at    = Required(int, size=64, column="updatedAt")

        # Sync fields, added by migration 002
        firebase_id  = Optional(str, nullable=True, column="firebaseId", autostrip=False,
                                index="index_saved_scripts_firebaseId")
        user_id      = Optional(str, nullable=True, column="userId", autostrip=False,
                                index="index_saved_scripts_userId")
        sync_status  = Required(int, default=0, sql_default="0", column="syncStatus",
                                index="index_saved_scripts_syncStatus")
        last_sync_at = Optional(int, size=64, column="lastSyncAt")
        version      = Required(int, default=1, sql_default="1")
        is_deleted   = Required(bool, default=False, sql_default="0", column="isDeleted",
                                index="index_saved_scripts_isDeleted")

    return Migration, SavedScript
