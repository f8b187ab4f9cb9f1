# tests/test_transforms.py
import logging
import pytest
import numpy as np
import pandas as pd
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from powers import make_power, make_root
from transforms import (
    filter_rows,
    select_columns,
    summarise_by_group,
    add_power_column,
    run_pipeline,
    power_table,
)


# ============================================================================
# Test Fixtures
# ============================================================================
@pytest.fixture
def sample_df():
    """Small frame: two regions, two years, one value column."""
    return pd.DataFrame({
        'region': ['North', 'North', 'South', 'South', 'East', 'East'],
        'year': [2020, 2021, 2020, 2021, 2020, 2021],
        'value': [4.0, 16.0, 9.0, 25.0, 1.0, 36.0],
        'label': ['a', 'b', 'c', 'd', 'e', 'f'],
    })


# ============================================================================
# Test filter_rows
# ============================================================================
class TestFilterRows:

    def test_equality(self, sample_df):
        out = filter_rows(sample_df, {'region': 'North'})
        assert out['region'].unique().tolist() == ['North']
        assert len(out) == 2

    def test_membership(self, sample_df):
        out = filter_rows(sample_df, {'region': ['North', 'East']})
        assert set(out['region']) == {'North', 'East'}

    def test_conditions_are_anded(self, sample_df):
        out = filter_rows(sample_df, {'region': ['North', 'South'], 'year': 2021})
        assert out['value'].tolist() == [16.0, 25.0]

    def test_empty_conditions_copy(self, sample_df):
        out = filter_rows(sample_df, None)
        pd.testing.assert_frame_equal(out, sample_df)
        assert out is not sample_df

    def test_unknown_column(self, sample_df):
        with pytest.raises(KeyError):
            filter_rows(sample_df, {'country': 'X'})


# ============================================================================
# Test select_columns
# ============================================================================
class TestSelectColumns:

    def test_order_kept(self, sample_df):
        out = select_columns(sample_df, ['value', 'region'])
        assert list(out.columns) == ['value', 'region']

    def test_none_returns_all(self, sample_df):
        assert list(select_columns(sample_df, None).columns) == list(sample_df.columns)

    def test_unknown_column(self, sample_df):
        with pytest.raises(KeyError):
            select_columns(sample_df, ['value', 'missing'])


# ============================================================================
# Test summarise_by_group
# ============================================================================
class TestSummariseByGroup:

    def test_mean(self, sample_df):
        out = summarise_by_group(sample_df, 'region', 'value', agg='mean')
        assert list(out.columns) == ['region', 'value_mean']
        # sorted by group key
        assert out['region'].tolist() == ['East', 'North', 'South']
        assert out['value_mean'].tolist() == pytest.approx([18.5, 10.0, 17.0])

    def test_multiple_keys_sum(self, sample_df):
        out = summarise_by_group(sample_df, ['year', 'region'], 'value', agg='sum')
        assert len(out) == 6
        assert out.loc[(out['year'] == 2020) & (out['region'] == 'South'), 'value_sum'].iloc[0] == 9.0

    def test_count(self, sample_df):
        out = summarise_by_group(sample_df, 'year', 'value', agg='count')
        assert out['value_count'].tolist() == [3, 3]

    def test_bad_agg(self, sample_df):
        with pytest.raises(ValueError):
            summarise_by_group(sample_df, 'region', 'value', agg='mode')

    def test_unknown_column(self, sample_df):
        with pytest.raises(KeyError):
            summarise_by_group(sample_df, 'country', 'value')


# ============================================================================
# Test add_power_column
# ============================================================================
class TestAddPowerColumn:

    def test_default_name_and_values(self, sample_df):
        out = add_power_column(sample_df, 'value', make_power(0.5))
        assert 'value_pow0.5' in out.columns
        np.testing.assert_array_almost_equal(out['value_pow0.5'], [2, 4, 3, 5, 1, 6])
        assert 'value_pow0.5' not in sample_df.columns

    def test_root_name(self, sample_df):
        out = add_power_column(sample_df, 'value', make_root(2), out='sqrt_value')
        np.testing.assert_array_almost_equal(out['sqrt_value'], [2, 4, 3, 5, 1, 6])

    def test_plain_callable(self, sample_df):
        out = add_power_column(sample_df, 'value', np.log)
        assert 'value_t' in out.columns

    def test_numeric_strings_converted(self):
        df = pd.DataFrame({'v': ['8', '27']})
        out = add_power_column(df, 'v', make_root(3))
        np.testing.assert_array_almost_equal(out['v_pow0.333333'], [2.0, 3.0])

    def test_text_raises(self):
        df = pd.DataFrame({'v': ['8', 'eight']})
        with pytest.raises(ValueError):
            add_power_column(df, 'v', make_root(3))

    def test_nan_result_logged(self, caplog):
        df = pd.DataFrame({'v': [4.0, -4.0]})
        with caplog.at_level(logging.WARNING):
            out = add_power_column(df, 'v', make_power(0.5))
        assert np.isnan(out['v_pow0.5'].iloc[1])
        assert "1 finite input(s)" in caplog.text

    def test_unknown_column(self, sample_df):
        with pytest.raises(KeyError):
            add_power_column(sample_df, 'nope', make_power(2))


# ============================================================================
# Test run_pipeline
# ============================================================================
class TestRunPipeline:

    def test_chain(self, sample_df):
        out = run_pipeline(sample_df, [
            (filter_rows, {'conditions': {'year': 2021}}),
            (select_columns, {'columns': ['region', 'value']}),
            (add_power_column, {'column': 'value', 'fn': make_power(0.5)}),
            (summarise_by_group, {'by': 'region', 'value_col': 'value_pow0.5', 'agg': 'max'}),
        ])
        assert out['region'].tolist() == ['East', 'North', 'South']
        assert out['value_pow0.5_max'].tolist() == pytest.approx([6.0, 4.0, 5.0])

    def test_no_steps(self, sample_df):
        assert run_pipeline(sample_df, []) is sample_df


# ============================================================================
# Test power_table
# ============================================================================
class TestPowerTable:

    def test_shape_and_values(self):
        tab = power_table([0, 2], [1, 4, 9], root_degrees=[2])
        assert list(tab.columns) == ['exponent', 'base', 'value']
        assert len(tab) == 9
        sq = tab[tab['exponent'] == 2.0]
        assert sq['value'].tolist() == [1.0, 16.0, 81.0]
        rt = tab[tab['exponent'] == 0.5]
        assert rt['value'].tolist() == pytest.approx([1.0, 2.0, 3.0])
        assert (tab.loc[tab['exponent'] == 0.0, 'value'] == 1.0).all()

    def test_zero_degree_rejected(self):
        from powers import DomainError
        with pytest.raises(DomainError):
            power_table([1], [1], root_degrees=[0])
