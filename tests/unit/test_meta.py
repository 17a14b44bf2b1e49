# Tests for metadata-only placeholders

import numpy as np
import pandas as pd
import pytest

from frameforge.dispatch.meta import make_meta, is_meta


def test_dataframe_meta_keeps_schema():
    df = pd.DataFrame({'a': [1, 2], 'b': ['x', 'y']}).set_index('b')
    meta = make_meta(df)

    assert len(meta) == 0
    assert meta.columns.tolist() == ['a']
    assert meta.dtypes['a'] == np.dtype('int64')
    assert meta.index.name == 'b'
    assert is_meta(meta)
    assert not is_meta(df)


def test_series_and_index_meta():
    series = pd.Series([1.5, 2.5], name='v')
    assert make_meta(series).name == 'v'
    assert make_meta(series).dtype == np.dtype('float64')
    assert len(make_meta(pd.Index([1, 2]))) == 0


def test_array_meta_keeps_trailing_shape():
    meta = make_meta(np.ones((4, 3), dtype='int32'))

    assert meta.shape == (0, 3)
    assert meta.dtype == np.dtype('int32')
    assert is_meta(meta)


def test_scalar_array_meta():
    assert make_meta(np.array(3.0)).shape == (0,)
    assert not is_meta(np.array(3.0))


def test_unsupported_type():
    with pytest.raises(TypeError):
        make_meta([1, 2, 3])
    assert not is_meta([])
