"""Supabase repository for food entries."""

from dataclasses import dataclass

from supabase import Client

from caloria.adapters.records import entry_from_record, entry_to_record
from caloria.domain.entries import FoodEntry
from caloria.services.store import EntryRepository

_COLUMNS = (
    "id, user_id, food_id, food, quantity, serving_size, meal_type, logged_at, "
    "nutrition, image_url, notes"
)


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for food entries."""

    client: Client

    def list_entries(self, user_id: str) -> list[FoodEntry]:
        """Return a user's entries, oldest first."""
        response = (
            self.client.table("food_entries")
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .order("logged_at", desc=False)
            .execute()
        )
        return [entry_from_record(row) for row in response.data or []]

    def save_entry(self, entry: FoodEntry) -> None:
        """Insert or replace an entry row by id."""
        response = (
            self.client.table("food_entries")
            .upsert(entry_to_record(entry), on_conflict="id")
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"Failed to save food entry {entry.id}")

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry row."""
        self.client.table("food_entries").delete().eq("id", entry_id).execute()
