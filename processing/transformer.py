"""
Transformer — applies a saved column mapping to seller product data.

Takes the full seller DataFrame and a persisted {seller column: attribute}
mapping and produces a DataFrame whose columns are the template attributes
in template order. Attributes without a mapped column are added empty;
seller columns that are not mapped are dropped.

Public API:
    apply_mapping(dataframe, persisted_mapping, attributes) → pd.DataFrame
"""

import logging
from collections.abc import Mapping, Sequence

import pandas as pd

from processing.mapping_validator import Attribute, from_persisted_mapping

logger = logging.getLogger(__name__)


def apply_mapping(
    dataframe: pd.DataFrame,
    persisted_mapping: Mapping[str, str],
    attributes: Sequence[Attribute],
) -> pd.DataFrame:
    """
    Rename and reorder seller data into the marketplace template layout.

    Args:
        dataframe: Seller product data, one column per seller header.
        persisted_mapping: Seller column → attribute name.
        attributes: Template attributes in template order.

    Returns:
        New DataFrame with one column per attribute. Unmapped attributes,
        and attributes whose mapped column is missing from *dataframe*,
        hold empty strings.
    """
    assignment = from_persisted_mapping(persisted_mapping)
    output = pd.DataFrame(index=dataframe.index)

    for attribute in attributes:
        column = assignment.get(attribute.name)
        if column and column in dataframe.columns:
            output[attribute.name] = dataframe[column]
            continue

        if column:
            logger.warning(
                f"Mapped column '{column}' for '{attribute.name}' "
                f"not found in seller data"
            )
        output[attribute.name] = ""

    used_columns = {assignment.get(attribute.name) for attribute in attributes}
    dropped = [column for column in dataframe.columns if column not in used_columns]
    if dropped:
        logger.debug(f"Dropping unmapped seller columns: {dropped}")

    logger.info(
        f"Applied mapping: {len(output)} rows, {len(output.columns)} attributes, "
        f"{len(dropped)} seller columns dropped"
    )

    return output.reset_index(drop=True)
