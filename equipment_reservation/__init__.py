"""
Система бронирования лабораторного оборудования.

Доменное ядро, сервисы приложения и хранилище в памяти.
"""

__version__ = "0.1.0"
