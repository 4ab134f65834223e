from typing import Any, Dict, List, Sequence, Tuple

from .processor import CellKind, parse_cell


class DataValidator:
    """负责检查数据集的形状异常；异常只记录为警告，从不抛出"""

    @staticmethod
    def validate_dataset(dataset: Sequence[Dict[str, Any]]) -> Tuple[bool, Dict[str, Any]]:
        """
        验证数据集的基本形状

        Args:
            dataset: 记录列表

        Returns:
            验证结果(True/False)和详细信息
        """
        validation_results = {
            "is_valid": True,
            "warnings": []
        }

        # 检查数据集是否为空
        if not dataset:
            validation_results["is_valid"] = False
            validation_results["warnings"].append({
                "type": "empty_dataset",
                "message": "Dataset contains no records"
            })
            return False, validation_results

        # 列集合来自第一条记录，后续记录中多出的列会被忽略
        declared = set(dataset[0].keys())
        extra_columns: List[str] = []
        for record in dataset[1:]:
            for key in record.keys():
                if key not in declared and key not in extra_columns:
                    extra_columns.append(key)
        if extra_columns:
            validation_results["warnings"].append({
                "type": "undeclared_columns",
                "message": f"Later records contain columns missing from the first record: {extra_columns}"
            })

        # 检查是否存在全空的列
        empty_columns = [
            column for column in dataset[0].keys()
            if all(parse_cell(record.get(column)).kind is CellKind.MISSING for record in dataset)
        ]
        if empty_columns:
            validation_results["warnings"].append({
                "type": "empty_columns",
                "message": f"Dataset contains completely empty columns: {empty_columns}"
            })

        if not dataset[0]:
            validation_results["is_valid"] = False
            validation_results["warnings"].append({
                "type": "no_columns",
                "message": "First record has no columns"
            })

        return validation_results["is_valid"], validation_results
