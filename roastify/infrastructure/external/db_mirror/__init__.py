"""
Mirror one-shot entre dos PostgreSQL: local <-> remoto.

Este paquete está diseñado para ejecutarse como job (script / endpoint admin),
no como proceso continuo.

Pasos de una corrida:
- Reconciliación de esquema: crea en local las tablas que solo existen en remoto.
- Tier crítico: reemplaza la tabla destino completa (dentro de una transacción).
- Tier restante: inserta solo filas faltantes en la dirección declarada.
- Verificación: compara conteos de filas en ambos lados.

La decisión de "sincronizar o no" una tabla se delega en una estrategia
intercambiable (conteo de filas, timestamp, checksum).
"""
