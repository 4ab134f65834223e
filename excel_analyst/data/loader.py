import io
import logging
from typing import Any, Dict, List, Tuple

import pandas as pd

from ..errors import InputError
from .processor import DataProcessor

logger = logging.getLogger(__name__)


class DataLoader:
    """负责把上传的CSV/Excel内容解析为记录列表 (Parses uploaded CSV/Excel content into records)"""

    @staticmethod
    def load_from_bytes(content: bytes, filename: str) -> Tuple[List[Dict[str, Any]], Dict[str, Any]]:
        """
        从上传的文件内容加载数据

        Args:
            content: 文件的原始字节
            filename: 原始文件名，用于判断文件类型

        Returns:
            记录列表和元数据

        Raises:
            InputError: 不支持的格式或解析失败
        """
        file_extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

        if file_extension == "csv":
            df, metadata_extra = DataLoader._process_csv(content)
        elif file_extension in ["xlsx", "xls"]:
            df, metadata_extra = DataLoader._process_excel(content)
        else:
            raise InputError(f"Unsupported file format: {file_extension or filename}")

        records = DataProcessor.to_records(df)
        columns = list(records[0].keys()) if records else []

        metadata = {
            "file_type": file_extension,
            "rows": len(records),
            "columns": len(columns),
            **metadata_extra
        }
        logger.info(f"Loaded {filename}: {metadata['rows']} rows, {metadata['columns']} columns")
        return records, metadata

    @staticmethod
    def _process_csv(content: bytes) -> Tuple[pd.DataFrame, Dict[str, Any]]:
        """处理CSV文件内容，依次尝试不同的编码和分隔符"""
        encodings = ["utf-8", "latin1"]
        separators = [",", ";", "\t", "|"]

        for encoding_attempt in encodings:
            for sep_attempt in separators:
                try:
                    current_df = pd.read_csv(
                        io.BytesIO(content),
                        sep=sep_attempt,
                        encoding=encoding_attempt,
                        engine="python",
                        skipinitialspace=True
                    )
                except UnicodeDecodeError:
                    # 编码不对，换下一个编码
                    break
                except pd.errors.EmptyDataError:
                    return pd.DataFrame(), {"encoding": encoding_attempt, "separator": sep_attempt}
                except (pd.errors.ParserError, ValueError):
                    continue

                # 分隔符真的切出了多列，或者单列的列名里不包含任何候选分隔符
                if current_df.shape[1] > 1 or \
                   (current_df.shape[1] == 1 and not any(sep in str(current_df.columns[0]) for sep in separators)):
                    return current_df, {"encoding": encoding_attempt, "separator": sep_attempt}

        try:
            df = pd.read_csv(io.BytesIO(content))
        except pd.errors.EmptyDataError:
            df = pd.DataFrame()
        except Exception as e:
            raise InputError(f"Failed to parse CSV: {e}")
        return df, {"encoding": "utf-8", "separator": ","}

    @staticmethod
    def _process_excel(content: bytes) -> Tuple[pd.DataFrame, Dict[str, Any]]:
        """处理Excel文件内容，只读取第一个工作表"""
        try:
            excel_file = pd.ExcelFile(io.BytesIO(content))
            sheet_name = excel_file.sheet_names[0]
            df = excel_file.parse(sheet_name)
        except Exception as e:
            raise InputError(f"Failed to parse Excel file: {e}")

        return df, {"sheet_name": sheet_name}
