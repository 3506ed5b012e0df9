"""
Example 02: Model Mapping

This example demonstrates mapping query results to annotated dataclasses and Pydantic models,
binding object attributes as parameters, and hydration/serialization overrides.
"""

from db_field import Engine, ConnectionConfig, SQLRegistry, DbField, db_field
from dataclasses import dataclass
from typing import Annotated
from pydantic import BaseModel
import tempfile
import sqlite3
from pathlib import Path


@dataclass
class Album:
    """Album model using a dataclass"""
    album_id: Annotated[int, DbField("AlbumId")] = 0
    title: Annotated[str, DbField("Title")] = ""
    artist_id: Annotated[int, DbField("ArtistId")] = 0


class AlbumTitle(BaseModel):
    """Album model using Pydantic"""
    album_id: Annotated[int, DbField("AlbumId")]
    title: Annotated[str, DbField("Title")]


@dataclass
class Setting:
    """Stores a bool as 'Y'/'N'"""
    id: int = db_field("Id", default=0)
    enabled: bool = db_field("Enabled", default=False)

    def should_override_hydration(self, field_name):
        return field_name == "enabled"

    def override_hydration(self, field_name, value):
        return value == "Y"

    def should_override_serialization(self, field_name):
        return field_name == "enabled"

    def override_serialization(self, field_name, value):
        return "Y" if value else "N"


def main():
    # Set up database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE albums (
            AlbumId INTEGER PRIMARY KEY,
            Title TEXT NOT NULL,
            ArtistId INTEGER NOT NULL
        )
    """)
    conn.execute("CREATE TABLE settings (Id INTEGER PRIMARY KEY, Enabled TEXT NOT NULL)")
    conn.commit()
    conn.close()

    # Set up SQL registry
    sql_dir = Path(tempfile.mkdtemp())
    album_dir = sql_dir / "albums"
    album_dir.mkdir()
    (album_dir / "insert.sql").write_text(
        "INSERT INTO albums (AlbumId, Title, ArtistId) VALUES (:AlbumId, :Title, :ArtistId)"
    )
    (album_dir / "list_all.sql").write_text("SELECT * FROM albums ORDER BY AlbumId")
    (album_dir / "get_by_id.sql").write_text("SELECT * FROM albums WHERE AlbumId = :AlbumId")

    # Configure engine
    config = ConnectionConfig(driver="sqlite", database=db_path)
    registry = SQLRegistry(str(sql_dir))
    engine = Engine.from_config(config, registry)

    print("=== Model Mapping ===\n")

    # Bind parameters from objects
    print("1. Insert from objects:")
    inserted = engine.execute_for_objects("albums.insert", [
        Album(1, "For Those About To Rock We Salute You", 1),
        Album(2, "Balls to the Wall", 2),
    ])
    print(f"   Inserted {inserted} rows\n")

    # Map to dataclass
    print("2. Dataclass Mapping:")
    album = engine.fetch_one(
        "albums.get_by_id", Album, lambda command: command.add_parameter("AlbumId", 1)
    )
    print(f"   Type: {type(album).__name__}")
    print(f"   Data: {album}\n")

    # Map to Pydantic model
    print("3. Pydantic Model Mapping:")
    for a in engine.fetch_all("albums.list_all", AlbumTitle):
        print(f"   - {a.album_id}: {a.title}")
    print()

    # Overrides
    print("4. Overrides:")
    engine.execute_for_objects(
        "INSERT INTO settings VALUES (:Id, :Enabled)", [Setting(1, True), Setting(2, False)]
    )
    stored = engine.execute_query(
        "SELECT Enabled FROM settings ORDER BY Id",
        lambda reader: [reader[0] for _ in iter(reader.read, False)],
    )
    print(f"   Stored: {stored}")
    print(f"   Loaded: {engine.fetch_all('SELECT * FROM settings ORDER BY Id', Setting)}\n")

    # Clean up
    engine.close()
    Path(db_path).unlink()
    for file in album_dir.glob("*.sql"):
        file.unlink()
    album_dir.rmdir()
    sql_dir.rmdir()


if __name__ == "__main__":
    main()
