"""
Servicio de mirror local <-> remoto.

Diseño (resumen):
- Abre una conexión por lado (ambas se cierran al salir, aun con error)
- Toma un advisory lock en ambos lados para no correr dos mirrors a la vez
- Paso 1: crea en local las tablas que solo existen en remoto
- Paso 2: tier crítico -> borra destino y reinserta todo el origen (UPSERT DO UPDATE)
- Paso 3: tier restante -> inserta filas faltantes (UPSERT DO NOTHING) según dirección
- Paso 4: verificación por conteo de filas

Política de errores:
- Conexión: fatal, se propaga (MirrorConnectionError).
- Tabla: se loguea y se sigue con la siguiente.
- Fila: se loguea, se cuenta y se sigue con la siguiente (savepoint por fila).

El borrado + reinserción de una tabla crítica corre en una sola transacción
del destino: si el job se interrumpe, la tabla queda como estaba.
"""

from __future__ import annotations

from typing import Iterator, Optional, Sequence

import psycopg
from loguru import logger

from .pg_repository import MirrorConnectionError, PostgresMirrorRepository
from .report import MirrorReport, TableComparison, VerificationReport, log_verification
from .schema_builder import build_create_table_statement
from .strategies import MirrorSide, RowCountStrategy, SyncStrategy, get_strategy
from .sync_config import DatabaseEndpoint, MirrorConfigError, MirrorManifest, TableSyncConfig
from .table_manifest import load_manifest
from .types import (
    Row,
    RowErrorLog,
    SchemaResult,
    SchemaStatus,
    SyncDirection,
    TableSyncResult,
    TableSyncStatus,
    utc_now,
)


def stable_lock_key(namespace: str, name: str) -> int:
    """
    Genera un lock key reproducible para pg_advisory_lock.
    """
    # hash() no es estable entre procesos; sumatoria simple de bytes.
    raw = (namespace + ":" + name).encode("utf-8")
    return int(sum(raw) % (2**31 - 1))


def _batched(rows: Sequence[Row], size: int) -> Iterator[Sequence[Row]]:
    for i in range(0, len(rows), size):
        yield rows[i : i + size]


class DatabaseMirrorService:
    """
    Orquestador de una corrida completa del mirror.
    """

    def __init__(
        self,
        *,
        local_repo: PostgresMirrorRepository,
        remote_repo: PostgresMirrorRepository,
        manifest: MirrorManifest,
        strategy: Optional[SyncStrategy] = None,
        batch_size: int = 100,
        max_logged_row_errors: int = 3,
    ) -> None:
        if batch_size <= 0:
            raise MirrorConfigError("batch_size debe ser mayor a 0")
        self._local = local_repo
        self._remote = remote_repo
        self._manifest = manifest.validate()
        self._strategy = strategy or RowCountStrategy()
        self._batch_size = batch_size
        self._max_logged_row_errors = max_logged_row_errors

    @property
    def manifest(self) -> MirrorManifest:
        return self._manifest

    @property
    def strategy(self) -> SyncStrategy:
        return self._strategy

    def run(self, *, dry_run: bool = False, reconcile_schema: bool = True) -> MirrorReport:
        report = MirrorReport(
            manifest=self._manifest.name,
            strategy=self._strategy.name,
            dry_run=dry_run,
        )
        logger.info("=" * 80)
        logger.info(
            f"MIRROR DE BASES DE DATOS - LOCAL <-> REMOTO "
            f"(manifiesto={self._manifest.name}, estrategia={self._strategy.name}, dry_run={dry_run})"
        )
        logger.info("=" * 80)

        with self._local.connect() as local_conn, self._remote.connect() as remote_conn:
            local = MirrorSide(self._local, local_conn)
            remote = MirrorSide(self._remote, remote_conn)
            self._ping(local)
            self._ping(remote)
            logger.info("Conectado a las bases LOCAL y REMOTA")

            lock_key = stable_lock_key("db_mirror", self._manifest.name)
            local_locked = self._local.try_advisory_lock(local_conn, lock_key)
            remote_locked = self._remote.try_advisory_lock(remote_conn, lock_key)
            if not (local_locked and remote_locked):
                logger.warning("Mirror ya está corriendo (advisory lock ocupado). Saliendo.")
                report.locked = True
                report.finished_at = utc_now()
                return report

            if reconcile_schema:
                report.schema = self.reconcile_schema(local, remote, dry_run=dry_run)

            logger.info("PASO 2: tablas críticas")
            logger.info("-" * 80)
            for table in self._manifest.critical_tables:
                report.tables.append(self.sync_table(table, local, remote, dry_run=dry_run))

            logger.info("PASO 3: tablas restantes")
            logger.info("-" * 80)
            for table in self._manifest.remaining_tables:
                report.tables.append(self.sync_table(table, local, remote, dry_run=dry_run))

            report.verification = self.verify(local, remote)

        report.finished_at = utc_now()
        log_verification(report.verification)
        return report

    def _ping(self, side: MirrorSide) -> None:
        try:
            side.repo.ping(side.conn)
        except psycopg.Error as e:
            raise MirrorConnectionError(f"La base {side.label} no responde: {e}") from e

    def reconcile_schema(
        self,
        local: MirrorSide,
        remote: MirrorSide,
        *,
        dry_run: bool = False,
    ) -> list[SchemaResult]:
        """
        Crea en local (IF NOT EXISTS) las tablas del manifiesto que solo existen en remoto.
        """
        logger.info("PASO 1: creando tablas que solo existen en remoto")
        logger.info("-" * 80)
        results: list[SchemaResult] = []

        for table in self._manifest.schema_tables:
            try:
                columns = remote.repo.fetch_column_definitions(remote.conn, table)
                if not columns:
                    logger.warning(f"Tabla {table} no encontrada en {remote.label}")
                    results.append(SchemaResult(table=table, status=SchemaStatus.SKIPPED))
                    continue

                statement = build_create_table_statement(table, columns)
                if not dry_run:
                    local.repo.execute(local.conn, statement)
                logger.info(f"Tabla {table} asegurada en {local.label}")
                results.append(SchemaResult(table=table, status=SchemaStatus.APPLIED, statement=statement))
            except Exception as e:
                logger.error(f"Error creando {table}: {e}")
                results.append(SchemaResult(table=table, status=SchemaStatus.FAILED, error=str(e)))

        return results

    def sync_table(
        self,
        table: TableSyncConfig,
        local: MirrorSide,
        remote: MirrorSide,
        *,
        dry_run: bool = False,
    ) -> TableSyncResult:
        if table.direction is SyncDirection.LOCAL_TO_REMOTE:
            source, destination = local, remote
        else:
            source, destination = remote, local

        result = TableSyncResult(
            table=table.name,
            tier=table.tier,
            direction=table.direction,
            status=TableSyncStatus.SKIPPED,
        )
        logger.info(f"Sincronizando {table.name} ({source.label} -> {destination.label}, {table.tier.value})...")

        try:
            decision = self._strategy.decide(table, source, destination)
            result.source_count = decision.source_count
            result.destination_count = decision.destination_count
            result.reason = decision.reason
            logger.info(
                f"   {source.label}: {decision.source_count} filas | "
                f"{destination.label}: {decision.destination_count} filas"
            )

            if not decision.should_sync:
                logger.info(f"   Sin cambios: {decision.reason}")
                return result

            if dry_run:
                result.status = TableSyncStatus.DRY_RUN
                logger.info(f"   [dry-run] se sincronizaría: {decision.reason}")
                return result

            rows = source.repo.fetch_rows(source.conn, table.name, order_by=table.pk_column)
            with destination.repo.transaction(destination.conn):
                if table.replaces_destination:
                    result.deleted_rows = destination.repo.delete_all_rows(destination.conn, table.name)
                    logger.info(f"   Vaciada {table.name} en {destination.label} ({result.deleted_rows} filas)")
                self._copy_rows(table, rows, destination, result)

            result.status = TableSyncStatus.SYNCED
            logger.info(
                f"   Sincronizadas {result.synced_rows} filas a {destination.label} "
                f"({result.failed_rows} errores)"
            )
        except Exception as e:
            logger.error(f"   Error sincronizando {table.name}: {e}")
            result.status = TableSyncStatus.FAILED
            result.error = str(e)

        return result

    def _copy_rows(
        self,
        table: TableSyncConfig,
        rows: Sequence[Row],
        destination: MirrorSide,
        result: TableSyncResult,
    ) -> None:
        if not rows:
            return

        errors = RowErrorLog(max_logged=self._max_logged_row_errors)
        total_batches = (len(rows) + self._batch_size - 1) // self._batch_size
        logger.info(f"   Transfiriendo {len(rows)} filas...")

        for batch_number, batch in enumerate(_batched(rows, self._batch_size), start=1):
            for row in batch:
                try:
                    with destination.repo.transaction(destination.conn):
                        destination.repo.upsert_row(
                            destination.conn,
                            table.name,
                            row,
                            pk_column=table.pk_column,
                            policy=table.on_conflict,
                        )
                    result.synced_rows += 1
                except psycopg.Error as e:
                    result.failed_rows += 1
                    if errors.add(str(e)):
                        logger.warning(f"     Error insertando fila {row.get(table.pk_column)}: {e}")
            logger.debug(f"     Lote {batch_number}/{total_batches} procesado")

        omitted = errors.count - len(errors.samples)
        if omitted > 0:
            logger.warning(f"     {omitted} errores de fila adicionales omitidos del log")

    def verify(self, local: MirrorSide, remote: MirrorSide) -> VerificationReport:
        report = VerificationReport()
        for name in self._manifest.all_tables:
            try:
                report.tables.append(
                    TableComparison(
                        table=name,
                        local_count=local.repo.count_rows(local.conn, name),
                        remote_count=remote.repo.count_rows(remote.conn, name),
                    )
                )
            except Exception as e:
                report.tables.append(TableComparison(table=name, local_count=None, remote_count=None, error=str(e)))
        return report


def build_from_settings(
    settings,
    *,
    manifest_path: Optional[str] = None,
    strategy: Optional[str] = None,
    batch_size: Optional[int] = None,
) -> DatabaseMirrorService:
    """
    Constructor "oficial" del mirror leyendo la configuración de la app.

    Variables requeridas para el lado remoto:
    - REMOTE_DB_HOST (o REMOTE_DATABASE_URL)
    """
    if not (settings.REMOTE_DATABASE_URL or settings.REMOTE_DB_HOST):
        raise MirrorConfigError("Falta REMOTE_DB_HOST (o REMOTE_DATABASE_URL) para el mirror")

    local = DatabaseEndpoint(
        label="LOCAL",
        host=settings.LOCAL_DB_HOST,
        port=settings.LOCAL_DB_PORT,
        database=settings.LOCAL_DB_NAME,
        user=settings.LOCAL_DB_USER,
        password=settings.LOCAL_DB_PASSWORD,
        sslmode=settings.LOCAL_DB_SSLMODE,
        dsn=settings.LOCAL_DATABASE_URL or None,
    )
    remote = DatabaseEndpoint(
        label="REMOTO",
        host=settings.REMOTE_DB_HOST,
        port=settings.REMOTE_DB_PORT,
        database=settings.REMOTE_DB_NAME,
        user=settings.REMOTE_DB_USER,
        password=settings.REMOTE_DB_PASSWORD,
        sslmode=settings.REMOTE_DB_SSLMODE,
        dsn=settings.REMOTE_DATABASE_URL or None,
    )

    return DatabaseMirrorService(
        local_repo=PostgresMirrorRepository(local),
        remote_repo=PostgresMirrorRepository(remote),
        manifest=load_manifest(manifest_path or settings.MIRROR_MANIFEST_PATH or None),
        strategy=get_strategy(strategy or settings.MIRROR_STRATEGY),
        batch_size=batch_size or settings.MIRROR_BATCH_SIZE,
    )
