"""Backend-level tests for the storage contract."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
from datetime import datetime

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.database import create_tables
from app.domain.errors import StorageFailure
from app.domain.models import OpenPhase, ReservationDraft, SpaceState
from app.stores import build_storage
from app.stores.file_store import FileStorage
from app.stores.memory_store import MemoryStorage
from app.stores.sql_store import SqlStorage
from app.services.history_service import list_history
from app.services.occupancy_service import reserve, check_in
from app.stores import file_store

DRAFT = ReservationDraft(holder_id="111", plate="ABC-123", space_code="A1",
                         driver_name="Juan", property_card_ref="TP-1")


class TestStorageContract:
    def test_seed_is_idempotent(self, storage):
        assert storage.seed_spaces(["A1", "C1"]) == 1
        with storage.snapshot() as uow:
            codes = [s.code for s in uow.spaces.list_all()]
        assert codes.count("A1") == 1
        assert codes[-1] == "C1"

    def test_set_state_unknown_code(self, storage):
        with storage.transaction() as uow:
            assert uow.spaces.set_state("Z9", SpaceState.OCCUPIED) is False
            assert uow.spaces.get_by_code("Z9") is None

    def test_mark_unknown_reservation(self, storage):
        with storage.transaction() as uow:
            assert uow.reservations.mark_entry(999, datetime.utcnow()) is False
            assert uow.reservations.mark_exit(999, datetime.utcnow()) is False

    def test_failed_transaction_rolls_back(self, storage):
        with pytest.raises(RuntimeError):
            with storage.transaction() as uow:
                uow.reservations.create(DRAFT)
                uow.spaces.set_state("A1", SpaceState.RESERVED)
                raise RuntimeError("boom")

        with storage.snapshot() as uow:
            assert uow.spaces.get_by_code("A1").state is SpaceState.FREE
            assert uow.reservations.list_all() == []

    def test_open_by_space_phases(self, storage):
        with storage.transaction() as uow:
            first = uow.reservations.create(DRAFT)
            second = uow.reservations.create(DRAFT)

        with storage.transaction() as uow:
            assert uow.reservations.find_open_by_space("A1", OpenPhase.AWAITING_ENTRY).id == first.id
            assert uow.reservations.find_open_by_space("A1", OpenPhase.AWAITING_EXIT) is None
            uow.reservations.mark_entry(first.id, datetime(2026, 1, 1, 8, 0))

        with storage.snapshot() as uow:
            assert uow.reservations.find_open_by_space("A1", OpenPhase.AWAITING_EXIT).id == first.id
            assert uow.reservations.find_open_by_space("A1", OpenPhase.AWAITING_ENTRY).id == second.id
            assert uow.reservations.find_active_by_holder("111").id == first.id


class TestFileStorage:
    def test_state_survives_reopen(self, tmp_path):
        path = str(tmp_path / "db.json")
        storage = FileStorage(path)
        storage.seed_spaces(["A1", "A2"])
        with storage.transaction() as uow:
            created = uow.reservations.create(DRAFT)
            uow.spaces.set_state("A1", SpaceState.RESERVED)
            uow.reservations.mark_entry(created.id, datetime(2026, 3, 1, 9, 30))

        reopened = FileStorage(path)
        with reopened.transaction() as uow:
            assert uow.spaces.get_by_code("A1").state is SpaceState.RESERVED
            (stored,) = uow.reservations.list_all()
            assert stored.entry_time == datetime(2026, 3, 1, 9, 30)
            assert uow.reservations.create(DRAFT).id == created.id + 1

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        assert data["espacios"][0] == {"id": 1, "codigo": "A1", "estado": "reservado"}
        assert data["reservas"][0]["hora_entrada"] == "2026-03-01T09:30:00"

    def test_loads_file_without_id_counters(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({
            "espacios": [{"id": 1, "codigo": "A1", "estado": "ocupado"},
                         {"id": 2, "codigo": "A2", "estado": "libre"}],
            "reservas": [{"id": 7, "dni": "111", "placa": "X", "codigo_espacio": "A1",
                          "nombre_conductor": "N", "tarjeta_propiedad": "T", "foto": None,
                          "hora_entrada": "2024-05-01T10:00:00.000Z", "hora_salida": None}],
            "reportes": [],
        }), encoding="utf-8")

        storage = FileStorage(str(path))
        with storage.transaction() as uow:
            assert uow.spaces.get_by_code("A1").state is SpaceState.OCCUPIED
            assert uow.reservations.find_active_by_holder("111").entry_time == datetime(2024, 5, 1, 10, 0)
            assert uow.reservations.create(DRAFT).id == 8

    def test_corrupt_file_is_a_storage_failure(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageFailure):
            FileStorage(str(path))

    def test_unwritable_target_keeps_committed_state(self, tmp_path):
        storage = FileStorage(str(tmp_path / "missing-dir" / "db.json"))
        with pytest.raises(StorageFailure):
            storage.seed_spaces(["A1"])
        with storage.snapshot() as uow:
            assert uow.spaces.list_all() == []

    def test_failed_rename_removes_temp_file(self, tmp_path, monkeypatch):
        storage = FileStorage(str(tmp_path / "db.json"))

        def fail_replace(src, dst):
            raise OSError("read-only filesystem")

        monkeypatch.setattr(file_store.os, "replace", fail_replace)
        with pytest.raises(StorageFailure):
            storage.seed_spaces(["A1"])

        assert list(tmp_path.iterdir()) == []

    def test_serialization_error_removes_temp_file(self, tmp_path, monkeypatch):
        storage = FileStorage(str(tmp_path / "db.json"))
        monkeypatch.setattr(file_store, "state_to_dict", lambda state: {"espacios": object()})

        with pytest.raises(TypeError):
            storage.seed_spaces(["A1"])

        assert list(tmp_path.iterdir()) == []
        with storage.snapshot() as uow:
            assert uow.spaces.list_all() == []


# Schema and row format written by the previous Node/SQLite server
LEGACY_SCHEMA = [
    """CREATE TABLE espacios (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        codigo TEXT UNIQUE,
        estado TEXT DEFAULT 'Libre'
    )""",
    """CREATE TABLE reservas (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        dni TEXT, placa TEXT, codigo_espacio TEXT, nombre_conductor TEXT,
        tarjeta_propiedad TEXT, foto TEXT, hora_entrada TEXT, hora_salida TEXT
    )""",
    """CREATE TABLE reportes (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        nombre TEXT, dni TEXT, descripcion TEXT, captura TEXT
    )""",
]


def legacy_sql_storage(tmp_path) -> SqlStorage:
    engine = create_engine(f"sqlite:///{tmp_path / 'parking.db'}", connect_args={"check_same_thread": False})
    with engine.begin() as conn:
        for ddl in LEGACY_SCHEMA:
            conn.execute(text(ddl))
        conn.execute(text("INSERT INTO espacios (codigo, estado) VALUES ('A1', 'ocupado'), ('A2', 'libre')"))
        conn.execute(text(
            "INSERT INTO reservas (dni, placa, codigo_espacio, nombre_conductor, tarjeta_propiedad, hora_entrada) "
            "VALUES ('111', 'X', 'A1', 'N', 'T', '2024-05-01T10:00:00.000Z')"
        ))
    return SqlStorage(sessionmaker(autocommit=False, autoflush=False, bind=engine))


class TestSqlStorage:
    def test_legacy_timestamps_mix_with_new_check_ins(self, tmp_path):
        storage = legacy_sql_storage(tmp_path)

        reserve(storage, "222", "Y", "A2", "M", "T2")
        check_in(storage, "A2")
        history = list_history(storage)

        assert [r.space_code for r in history] == ["A2", "A1"]
        assert history[1].entry_time == datetime(2024, 5, 1, 10, 0)
        assert all(r.entry_time.tzinfo is None for r in history)

    def test_sqlalchemy_error_becomes_storage_failure_and_rolls_back(self):
        engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
        create_tables(bind=engine)
        storage = SqlStorage(sessionmaker(autocommit=False, autoflush=False, bind=engine))
        storage.seed_spaces(["A1"])
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE reservas"))

        with pytest.raises(StorageFailure):
            with storage.transaction() as uow:
                uow.spaces.set_state("A1", SpaceState.OCCUPIED)
                uow.reservations.create(DRAFT)

        with pytest.raises(StorageFailure):
            reserve(storage, "111", "ABC-123", "A1", "Juan", "TP-1")

        with storage.snapshot() as uow:
            assert uow.spaces.get_by_code("A1").state is SpaceState.FREE


class TestBuildStorage:
    def test_memory_backend(self):
        assert isinstance(build_storage("memory"), MemoryStorage)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_storage("redis")
