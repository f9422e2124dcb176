"""
Visualization Module

Plots for the forecasting run:
- Candidate model comparison (macro accuracy)
- Monthly revenue per category (training aggregates)
- Per-category revenue forecast for the target month
"""

import os
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns
from typing import Optional, List
import warnings

from .records import month_key_to_timestamp

warnings.filterwarnings('ignore')

# Set style
sns.set_style("whitegrid")
plt.rcParams['figure.figsize'] = (15, 8)
plt.rcParams['font.size'] = 10


def plot_model_comparison(summary_df: pd.DataFrame,
                          save_path: Optional[str] = None) -> None:
    """
    Bar chart of in-sample macro accuracy per candidate

    Args:
        summary_df: SelectionResult.summary() frame (model, macro_accuracy, selected)
        save_path: Path to save plot
    """
    fig, ax = plt.subplots(figsize=(10, 6))

    colors = ['seagreen' if selected else 'steelblue' for selected in summary_df['selected']]
    ax.bar(summary_df['model'], summary_df['macro_accuracy'], alpha=0.8, color=colors)

    for i, value in enumerate(summary_df['macro_accuracy']):
        ax.text(i, value + 0.01, f'{value:.3f}', ha='center', fontsize=10)

    ax.set_ylim(0, 1.05)
    ax.set_title('Candidate Models: Macro Accuracy (in-sample)', fontsize=14, fontweight='bold')
    ax.set_ylabel('Macro Accuracy', fontsize=12)
    ax.grid(True, alpha=0.3, axis='y')
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Plot saved: {save_path}")

    plt.close()


def plot_monthly_revenue(aggregates: pd.DataFrame,
                         save_path: Optional[str] = None) -> None:
    """
    Monthly revenue per category over time

    Args:
        aggregates: Month-category rows (month_key, category, revenue)
        save_path: Path to save plot
    """
    plot_df = aggregates.copy()
    plot_df['period'] = month_key_to_timestamp(plot_df['month_key'])

    fig, ax = plt.subplots(figsize=(15, 6))

    for category in sorted(plot_df['category'].unique()):
        cat_df = plot_df[plot_df['category'] == category].sort_values('period')
        ax.plot(cat_df['period'], cat_df['revenue'],
                label=category, linewidth=2, marker='o', markersize=4, alpha=0.8)

    ax.set_title('Monthly Revenue by Category', fontsize=14, fontweight='bold')
    ax.set_xlabel('Month', fontsize=12)
    ax.set_ylabel('Revenue', fontsize=12)
    ax.legend(loc='best', fontsize=10)
    ax.grid(True, alpha=0.3)
    plt.xticks(rotation=45)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Plot saved: {save_path}")

    plt.close()


def plot_revenue_forecast(forecast_df: pd.DataFrame,
                          save_path: Optional[str] = None) -> None:
    """
    Predicted revenue per category for the target month

    Args:
        forecast_df: DataFrame with category, target_month, predicted_revenue
        save_path: Path to save plot
    """
    ordered = forecast_df.sort_values('predicted_revenue', ascending=False)
    month = ordered['target_month'].iloc[0] if len(ordered) else ''

    fig, ax = plt.subplots(figsize=(12, 6))
    ax.bar(ordered['category'], ordered['predicted_revenue'], alpha=0.7, color='coral')
    ax.set_title(f'Predicted Revenue by Category (month {month})', fontsize=14, fontweight='bold')
    ax.set_ylabel('Predicted Revenue', fontsize=12)
    ax.grid(True, alpha=0.3, axis='y')
    plt.setp(ax.xaxis.get_majorticklabels(), rotation=45)
    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Plot saved: {save_path}")

    plt.close()


def create_all_visualizations(model_summary: pd.DataFrame,
                              train_aggregates: pd.DataFrame,
                              revenue_forecast: pd.DataFrame,
                              output_dir: str = 'outputs/plots') -> List[str]:
    """
    Create all plots for a run

    Args:
        model_summary: Candidate comparison frame
        train_aggregates: Training month-category rows
        revenue_forecast: Per-category revenue forecast frame
        output_dir: Directory to save plots

    Returns:
        Paths of the saved plots
    """
    print("="*60)
    print("GENERATING VISUALIZATIONS")
    print("="*60)

    os.makedirs(output_dir, exist_ok=True)
    paths = [
        f'{output_dir}/model_comparison.png',
        f'{output_dir}/monthly_revenue.png',
        f'{output_dir}/revenue_forecast.png',
    ]

    plot_model_comparison(model_summary, save_path=paths[0])
    plot_monthly_revenue(train_aggregates, save_path=paths[1])
    plot_revenue_forecast(revenue_forecast, save_path=paths[2])

    print("\n" + "="*60)
    print("VISUALIZATION COMPLETE")
    print("="*60)
    print(f"All plots saved to: {output_dir}/")

    return paths
