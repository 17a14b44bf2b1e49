"""Integration tests: dispatch through the built-in pandas/sparse/numpy/masked backends."""

import numpy as np
import pandas as pd
import pytest

import frameforge
from frameforge.backends.builtin import register_builtin_backends
from frameforge.backends.registry import BackendRegistry
from frameforge.dispatch.meta import make_meta
from frameforge.dispatch.router import DispatchRouter
from frameforge.errors import FallbackConversionError, FallbackWarning, OperationNotImplementedError


@pytest.fixture
def builtin_registry():
    registry = BackendRegistry()
    register_builtin_backends(registry, include_entry_points=False)
    return registry


@pytest.fixture
def builtin_router(builtin_registry, config):
    return DispatchRouter(builtin_registry, config)


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "values.csv"
    path.write_text("name,count,score,flag\na,0,0.0,False\nb,3,1.5,True\nc,0,0.0,False\n")
    return path


class TestBuiltinRegistry:
    """Test the built-in registrations."""

    def test_labels(self, builtin_registry):
        assert sorted(builtin_registry.list_backends('dataframe')['dataframe']) == ['pandas', 'sparse']
        assert sorted(builtin_registry.list_backends('array')['array']) == ['masked', 'numpy']

    def test_chains(self, builtin_registry):
        assert builtin_registry.fallback_chain('dataframe', 'sparse') == ['sparse', 'pandas']
        assert builtin_registry.fallback_chain('array', 'masked') == ['masked', 'numpy']

    def test_defaults_are_registered(self, builtin_registry):
        for kind in ('dataframe', 'array'):
            assert builtin_registry.has_backend(kind, builtin_registry.default_label(kind))


class TestPandasBackend:
    """Test the default DataFrame backend."""

    def test_read_csv(self, builtin_router, csv_file):
        df = builtin_router.dispatch('dataframe', 'read_csv', csv_file)
        assert df['count'].tolist() == [0, 3, 0]

    def test_read_json(self, builtin_router, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text('[{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]')

        df = builtin_router.dispatch('dataframe', 'read_json', path)
        assert df['a'].tolist() == [1, 2]

    def test_from_dict(self, builtin_router):
        df = builtin_router.dispatch('dataframe', 'from_dict', {'a': [1, 2]})
        assert isinstance(df, pd.DataFrame)
        assert df.shape == (2, 1)

    def test_from_array(self, builtin_router):
        df = builtin_router.dispatch('dataframe', 'from_array', np.arange(6).reshape(3, 2), columns=['x', 'y'])
        assert df.columns.tolist() == ['x', 'y']
        assert len(builtin_router.dispatch('dataframe', 'from_array', [1, 2, 3])) == 3

    def test_from_array_rejects_3d(self, builtin_router):
        with pytest.raises(ValueError, match="1-D or 2-D"):
            builtin_router.dispatch('dataframe', 'from_array', np.zeros((2, 2, 2)))

    def test_from_pandas_copies(self, builtin_router):
        source = pd.DataFrame({'a': [1]})
        df = builtin_router.dispatch('dataframe', 'from_pandas', source)
        df.loc[0, 'a'] = 99
        assert source.loc[0, 'a'] == 1

    def test_empty_schema(self, builtin_router):
        df = builtin_router.dispatch('dataframe', 'empty', {'x': 'int64', 'y': 'float64'}, index_name='id')
        assert len(df) == 0
        assert df.dtypes.tolist() == [np.dtype('int64'), np.dtype('float64')]
        assert df.index.name == 'id'


class TestSparseBackend:
    """Test the sparse backend and its fallback to pandas."""

    def test_native_from_dict_no_warning(self, builtin_router, config, recwarn):
        with config.set(dataframe__backend__library='sparse'):
            df = builtin_router.dispatch('dataframe', 'from_dict', {'a': [0, 0, 5]})

        assert isinstance(df['a'].dtype, pd.SparseDtype)
        assert not [w for w in recwarn if issubclass(w.category, FallbackWarning)]

    def test_read_csv_through_pandas(self, builtin_router, config, csv_file):
        """Test read_csv is served by pandas and moved to sparse columns."""
        with config.set(dataframe__backend__library='sparse'):
            with pytest.warns(FallbackWarning, match="used 'pandas'"):
                df = builtin_router.dispatch('dataframe', 'read_csv', csv_file)

        assert isinstance(df['count'].dtype, pd.SparseDtype)
        assert isinstance(df['score'].dtype, pd.SparseDtype)
        assert isinstance(df['flag'].dtype, pd.SparseDtype)
        assert not isinstance(df['name'].dtype, pd.SparseDtype)
        assert df['count'].sparse.to_dense().tolist() == [0, 3, 0]

    def test_metadata_only_frame_keeps_schema(self, builtin_router, config):
        """Test an empty pandas result is moved with its column dtypes."""
        with config.set(dataframe__backend__library='sparse', dataframe__backend__warn_fallback=False):
            df = builtin_router.dispatch('dataframe', 'empty', {'x': 'int64', 'label': 'object'})

        assert len(df) == 0
        assert df.columns.tolist() == ['x', 'label']
        assert df.dtypes['x'] == pd.SparseDtype('int64')
        assert not isinstance(df.dtypes['label'], pd.SparseDtype)

    def test_disabled_fallback(self, builtin_router, config, csv_file):
        with config.set(dataframe__backend__library='sparse', dataframe__backend__allow_fallback=False):
            with pytest.raises(OperationNotImplementedError):
                builtin_router.dispatch('dataframe', 'read_csv', csv_file)

    def test_to_sparse_series(self):
        from frameforge.backends.dataframe.sparse import SparseBackend

        series = SparseBackend.to_sparse(pd.Series([0.0, 1.0]), fill_value=0.0)
        assert series.dtype == pd.SparseDtype('float64', 0.0)
        assert not isinstance(SparseBackend.to_sparse(make_meta(pd.Series(['a']))).dtype, pd.SparseDtype)

    def test_conversion_failure_surfaces(self, builtin_registry, config):
        builtin_registry.resolve('dataframe', 'pandas').add_operation('from_scalar', lambda v: v)
        router = DispatchRouter(builtin_registry, config)

        with config.set(dataframe__backend__library='sparse', dataframe__backend__warn_fallback=False):
            with pytest.raises(FallbackConversionError) as exc_info:
                router.dispatch('dataframe', 'from_scalar', 3)

        assert isinstance(exc_info.value.__cause__, TypeError)


class TestArrayBackends:
    """Test numpy and masked array backends."""

    def test_numpy_default(self, builtin_router):
        arr = builtin_router.dispatch('array', 'zeros', (2, 3), dtype='int32')
        assert type(arr) is np.ndarray
        assert arr.shape == (2, 3)
        assert arr.dtype == np.dtype('int32')

    @pytest.mark.parametrize('operation,args,kwargs,expected', [
        ('ones', ((2,),), {}, [1.0, 1.0]),
        ('full', ((2,), 7), {}, [7, 7]),
        ('arange', (3,), {}, [0, 1, 2]),
        ('linspace', (0, 1), {'num': 3}, [0.0, 0.5, 1.0]),
    ])
    def test_numpy_constructors(self, builtin_router, operation, args, kwargs, expected):
        arr = builtin_router.dispatch('array', operation, *args, **kwargs)
        assert arr.tolist() == expected

    def test_numpy_load(self, builtin_router, tmp_path):
        path = tmp_path / "a.npy"
        np.save(path, np.eye(2))
        assert builtin_router.dispatch('array', 'load', path).tolist() == [[1.0, 0.0], [0.0, 1.0]]

    def test_from_array_copies(self, builtin_router):
        source = np.array([1, 2, 3])
        arr = builtin_router.dispatch('array', 'from_array', source)
        arr[0] = 100
        assert source[0] == 1

    def test_masked_native(self, builtin_router, config):
        with config.set(array__backend__library='masked'):
            arr = builtin_router.dispatch('array', 'masked_invalid', [1.0, np.nan, 3.0])

        assert isinstance(arr, np.ma.MaskedArray)
        assert arr.mask.tolist() == [False, True, False]

    def test_masked_from_array_with_mask(self, builtin_router, config):
        with config.set(array__backend__library='masked'):
            arr = builtin_router.dispatch('array', 'from_array', [1, 2, 3], mask=[0, 1, 0])
        assert arr.count() == 2

    def test_masked_falls_back_to_numpy(self, builtin_router, config):
        with config.set(array__backend__library='masked'):
            with pytest.warns(FallbackWarning):
                arr = builtin_router.dispatch('array', 'eye', 2)

        assert isinstance(arr, np.ma.MaskedArray)
        assert arr.shape == (2, 2)
        assert not np.ma.is_masked(arr)

    def test_masked_metadata_only(self, builtin_router, config):
        with config.set(array__backend__library='masked', array__backend__warn_fallback=False):
            arr = builtin_router.dispatch('array', 'empty', (0, 4), dtype='float32')

        assert isinstance(arr, np.ma.MaskedArray)
        assert arr.shape == (0, 4)
        assert arr.dtype == np.dtype('float32')

    def test_dataframe_scope_does_not_affect_arrays(self, builtin_router, config):
        with config.set(dataframe__backend__library='sparse'):
            arr = builtin_router.dispatch('array', 'ones', 2)
        assert type(arr) is np.ndarray


class TestPackageApi:
    """Test the module-level API over the process-wide registry."""

    def test_dispatch_default(self):
        df = frameforge.dispatch('dataframe', 'from_dict', {'a': [1, 2, 3]})
        assert isinstance(df, pd.DataFrame)

    def test_dispatch_with_scoped_config(self):
        with frameforge.config.set(array__backend__library='masked', array__backend__warn_fallback=False):
            arr = frameforge.dispatch('array', 'zeros', 3)
        assert isinstance(arr, np.ma.MaskedArray)
        assert type(frameforge.dispatch('array', 'zeros', 3)) is np.ndarray

    def test_fallback_warning_points_at_caller(self):
        """Test the warning from frameforge.dispatch names this file, once per call site."""
        with frameforge.config.set(array__backend__library='masked'):
            with pytest.warns(FallbackWarning) as record:
                frameforge.dispatch('array', 'zeros', 2)
                frameforge.dispatch('array', 'ones', 2)

        assert [w.filename for w in record] == [__file__, __file__]
        assert record[0].lineno != record[1].lineno

    def test_default_registry_contents(self):
        registry = frameforge.get_default_registry()
        assert registry.has_backend('dataframe', 'sparse')
        assert registry.has_backend('array', 'masked')
