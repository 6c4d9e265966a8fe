# src/duplex_http/utils/files.py
"""
Сохранение тела ответа на диск.
"""

import os
from pathlib import Path
from typing import Union


def write_file(path: Union[str, Path], data: bytes) -> int:
    """
    Записывает данные в файл (перезаписывая существующий).

    Файл пишется во временный рядом и атомарно переименовывается, поэтому
    при ошибке записи старое содержимое не теряется.

    Args:
        path: Путь к файлу
        data: Данные для записи

    Returns:
        Количество записанных байт

    Raises:
        OSError: Файл не удалось открыть или записать
    """
    target = Path(path)
    tmp_path = target.with_name(f".{target.name}.part")

    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
        os.replace(tmp_path, target)
    except OSError:
        # Очищаем частично записанный файл
        if tmp_path.exists():
            tmp_path.unlink()
        raise

    return len(data)
