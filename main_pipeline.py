"""
Main Forecasting Pipeline

End-to-end pipeline for monthly sales forecasting:
1. Generate/Load transactions
2. Stratified train/test split (per category)
3. Aggregate to month-category level and compute class weights
4. Persist the held-out pool
5. Train candidate classifiers and select the best
6. Forecast next month's best-selling category
7. Train the revenue regression model
8. Forecast per-category revenue for the target month
9. Create visualizations
10. Save results
"""

import pandas as pd
import os
from datetime import datetime
from typing import Dict, Optional
import joblib

# Import configuration
from config import (
    DATA_CONFIG, SPLIT_CONFIG, CLASSIFIER_CONFIG, REGRESSION_CONFIG,
    OUTPUT_CONFIG, VISUALIZATION_CONFIG
)

# Import custom modules
from sales_forecast.data_generator import generate_and_save_data
from sales_forecast.records import load_transactions, save_holdout_dataset
from sales_forecast.splitting import stratified_split
from sales_forecast.aggregation import aggregate_monthly, compute_class_weights, validate_aggregated_data
from sales_forecast.trainers import default_trainers
from sales_forecast.model_selection import select_best_model
from sales_forecast.evaluation import evaluate_holdout
from sales_forecast.forecast import CategoryForecaster
from sales_forecast.revenue import RevenueForecastPipeline, results_to_frame
from sales_forecast.visualization import create_all_visualizations


class ForecastingPipeline:
    """Complete forecasting pipeline (configured via config.py)"""

    def __init__(self,
                 data_config: Optional[Dict] = None,
                 split_config: Optional[Dict] = None,
                 output_config: Optional[Dict] = None,
                 create_plots: Optional[bool] = None):
        """
        Initialize pipeline with config from config.py

        Args:
            data_config: Overrides for DATA_CONFIG
            split_config: Overrides for SPLIT_CONFIG
            output_config: Overrides for OUTPUT_CONFIG
            create_plots: Override VISUALIZATION_CONFIG['create_plots']
        """
        # Load configuration
        self.data_config = {**DATA_CONFIG, **(data_config or {})}
        self.split_config = {**SPLIT_CONFIG, **(split_config or {})}
        self.output_config = {**OUTPUT_CONFIG, **(output_config or {})}
        self.create_plots = VISUALIZATION_CONFIG['create_plots'] if create_plots is None else create_plots

        self.data_path = self.data_config['data_path']
        self.output_dir = self.output_config['output_dir']

        # Create output directories
        os.makedirs(self.output_dir, exist_ok=True)
        if self.create_plots:
            os.makedirs(f"{self.output_dir}/plots", exist_ok=True)
        os.makedirs(self.output_config['model_dir'], exist_ok=True)
        os.makedirs(self.output_config['data_dir'], exist_ok=True)

        # Pipeline components (will be populated)
        self.transactions_df = None
        self.train_pool = None
        self.test_pool = None
        self.train_df = None
        self.selection = None
        self.holdout_metrics = None
        self.best_seller = None
        self.revenue_pipeline = None
        self.revenue_forecast = None

    def run_complete_pipeline(self) -> Dict:
        """
        Run complete forecasting pipeline (configured via config.py)

        Returns:
            Dictionary with pipeline results
        """
        print("\n" + "="*80)
        print("🚀 MONTHLY SALES FORECASTING PIPELINE")
        print("="*80)
        print(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print("="*80 + "\n")

        self.step_1_load_data()
        self.step_2_split_data()
        self.step_3_aggregate_data()
        self.step_4_save_holdout()
        self.step_5_select_classifier()
        self.step_6_forecast_best_seller()
        self.step_7_train_revenue_model()
        self.step_8_forecast_revenue()

        if self.create_plots:
            self.step_9_visualize()

        self.step_10_save_results()

        print("\n" + "="*80)
        print("PIPELINE COMPLETE!")
        print("="*80)
        print(f"End time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"\nOutputs saved to: {self.output_dir}/")
        print("="*80 + "\n")

        return {
            'best_model_name': self.selection.name,
            'macro_accuracy': self.selection.macro_accuracy,
            'model_summary': self.selection.summary(),
            'best_seller': self.best_seller,
            'revenue_forecast': self.revenue_forecast
        }

    def step_1_load_data(self):
        """Step 1: Load or generate transactions"""
        print("\n" + "="*80)
        print("STEP 1: DATA LOADING/GENERATION")
        print("="*80)

        if self.data_config['generate_new_data']:
            generate_and_save_data(
                output_path=self.data_path,
                start_date=self.data_config['start_date'],
                n_months=self.data_config['n_months'],
                categories=self.data_config['categories'],
                transactions_per_month=self.data_config['transactions_per_month'],
                seed=self.data_config['seed']
            )

        print(f"\n📂 Loading transactions from: {self.data_path}")
        self.transactions_df = load_transactions(self.data_path, kind='month_year')
        print(f"Loaded {len(self.transactions_df):,} transactions")
        print(f"Categories: {', '.join(pd.unique(self.transactions_df['category']))}")

        print("\n✓ Step 1 complete")

    def step_2_split_data(self):
        """Step 2: Per-category train/test split"""
        print("\n" + "="*80)
        print("STEP 2: STRATIFIED TRAIN/TEST SPLIT")
        print("="*80)

        self.train_pool, self.test_pool = stratified_split(
            self.transactions_df,
            test_fraction=self.split_config['test_fraction'],
            seed=self.split_config['seed']
        )

        print("\n✓ Step 2 complete")

    def step_3_aggregate_data(self):
        """Step 3: Aggregate training pool and compute class weights"""
        print("\n" + "="*80)
        print("STEP 3: DATA AGGREGATION (TRANSACTION → MONTH-CATEGORY)")
        print("="*80)

        train_aggregates = aggregate_monthly(self.train_pool, verbose=True)
        self.train_df = compute_class_weights(train_aggregates, verbose=True)
        validate_aggregated_data(self.train_df)

        self.train_df.to_csv(f"{self.output_config['data_dir']}/train_aggregates.csv", index=False)
        print(f"\n✅ Training data ready with {len(self.train_df)} entries (including weights).")

        print("\n✓ Step 3 complete")

    def step_4_save_holdout(self):
        """Step 4: Persist the held-out pool"""
        print("\n" + "="*80)
        print("STEP 4: SAVING HELD-OUT DATA")
        print("="*80)

        save_holdout_dataset(self.test_pool, self.output_config['holdout_path'])

        print("\n✓ Step 4 complete")

    def step_5_select_classifier(self):
        """Step 5: Train candidates and select the best classifier"""
        print("\n" + "="*80)
        print("STEP 5: CLASSIFIER TRAINING & SELECTION")
        print("="*80)

        trainers = default_trainers(CLASSIFIER_CONFIG)
        self.selection = select_best_model(self.train_df, trainers)

        # Reported only; selection above is in-sample
        if len(self.test_pool) > 0:
            self.holdout_metrics = evaluate_holdout(self.selection.model, self.test_pool)

        joblib.dump(self.selection.model, self.output_config['classifier_model_path'])
        print(f"\n  📦 Selected model saved to: {self.output_config['classifier_model_path']}")

        print("\n✓ Step 5 complete")

    def step_6_forecast_best_seller(self):
        """Step 6: Forecast next month's best seller from the persisted held-out data"""
        print("\n" + "="*80)
        print("STEP 6: BEST-SELLER FORECAST")
        print("="*80)

        print("🔍 Aggregating and predicting from detailed test data...")
        forecaster = CategoryForecaster(self.selection.model)
        self.best_seller = forecaster.forecast_from_file(self.output_config['holdout_path'])

        print("\n✓ Step 6 complete")

    def step_7_train_revenue_model(self):
        """Step 7: Train and save the revenue regression model"""
        print("\n" + "="*80)
        print("STEP 7: REVENUE MODEL TRAINING")
        print("="*80)

        pipeline = RevenueForecastPipeline(
            params=REGRESSION_CONFIG['params'],
            num_boost_round=REGRESSION_CONFIG['num_boost_round']
        )
        pipeline.train_from_file(self.data_path)
        pipeline.training_metrics()
        pipeline.save(self.output_config['revenue_model_path'])

        self.revenue_pipeline = pipeline

        print("\n✓ Step 7 complete")

    def step_8_forecast_revenue(self):
        """Step 8: Predict revenue per category for the target month"""
        print("\n" + "="*80)
        print("STEP 8: REVENUE FORECAST")
        print("="*80)

        pipeline = RevenueForecastPipeline.load(self.output_config['revenue_model_path'])
        print("✅ Model loaded.")

        self.revenue_forecast = pipeline.predict_month(REGRESSION_CONFIG['target_month'])

        print("\n✓ Step 8 complete")

    def step_9_visualize(self):
        """Step 9: Create visualizations"""
        print("\n" + "="*80)
        print("STEP 9: VISUALIZATION")
        print("="*80)

        create_all_visualizations(
            self.selection.summary(),
            self.train_df,
            results_to_frame(self.revenue_forecast),
            output_dir=f'{self.output_dir}/plots'
        )

        print("\n✓ Step 9 complete")

    def step_10_save_results(self):
        """Step 10: Save all results"""
        print("\n" + "="*80)
        print("STEP 10: SAVING RESULTS")
        print("="*80)

        self.selection.summary().to_csv(f'{self.output_dir}/model_comparison.csv', index=False)
        print("  ✓ Model comparison saved")

        results_to_frame(self.revenue_forecast).to_csv(f'{self.output_dir}/revenue_forecast.csv', index=False)
        print("  ✓ Revenue forecast saved")

        self._create_summary_report()
        print("  ✓ Summary report created")

        print("\n✓ Step 10 complete")

    def _create_summary_report(self):
        """Create summary report"""
        report_path = f'{self.output_dir}/SUMMARY_REPORT.txt'

        with open(report_path, 'w', encoding='utf-8') as f:
            f.write("="*80 + "\n")
            f.write("MONTHLY SALES FORECASTING - SUMMARY REPORT\n")
            f.write("="*80 + "\n\n")

            f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")

            f.write("DATA SUMMARY\n")
            f.write("-"*80 + "\n")
            f.write(f"Transactions: {len(self.transactions_df):,}\n")
            f.write(f"Train pool: {len(self.train_pool):,} / Test pool: {len(self.test_pool):,}\n")
            f.write(f"Training aggregates: {len(self.train_df):,}\n")
            f.write(f"Categories: {', '.join(pd.unique(self.transactions_df['category']))}\n\n")

            f.write("MODEL SELECTION (macro accuracy, in-sample)\n")
            f.write("-"*80 + "\n")
            f.write(self.selection.summary().to_string(index=False))
            f.write("\n\n")
            f.write(f"Best model: {self.selection.name} ({self.selection.macro_accuracy:.4f})\n")
            if self.holdout_metrics is not None:
                f.write(f"Held-out macro accuracy: {self.holdout_metrics['macro_accuracy']:.4f}\n")
            f.write("\n")

            f.write("NEXT MONTH BEST SELLER\n")
            f.write("-"*80 + "\n")
            f.write(f"Month: {self.best_seller.target_month}\n")
            f.write(f"Best seller: {self.best_seller.predicted_category} "
                    f"(revenue {self.best_seller.revenue:,.2f})\n\n")

            f.write(f"REVENUE FORECAST (month {REGRESSION_CONFIG['target_month']})\n")
            f.write("-"*80 + "\n")
            for result in self.revenue_forecast:
                f.write(f"{result.category}: {result.predicted_revenue:,.2f}\n")

            f.write("\n" + "="*80 + "\n")

        print(f"\n  Summary report saved to: {report_path}")


def main():
    """Main entry point - all configuration is in config.py"""
    pipeline = ForecastingPipeline()

    results = pipeline.run_complete_pipeline()

    print("\n" + "="*80)
    print("SUCCESS! Complete forecasting pipeline executed.")
    print("="*80)
    print(f"\n🏆 Best model: {results['best_model_name']} (MacroAccuracy {results['macro_accuracy']:.4f})")
    print(f"🔮 Best seller for {results['best_seller'].target_month}: "
          f"{results['best_seller'].predicted_category} with Revenue: {results['best_seller'].revenue:,.2f}")
    print(f"📊 Revenue forecast for month {REGRESSION_CONFIG['target_month']}:")
    for result in results['revenue_forecast']:
        print(f"  - {result.category}: ${result.predicted_revenue:,.2f}")
    print("\nKey Outputs:")
    print(f"  - Held-out data: {OUTPUT_CONFIG['holdout_path']}")
    print(f"  - Models: {OUTPUT_CONFIG['model_dir']}/")
    print(f"  - Model comparison: {OUTPUT_CONFIG['output_dir']}/model_comparison.csv")
    print(f"  - Revenue forecast: {OUTPUT_CONFIG['output_dir']}/revenue_forecast.csv")
    print(f"  - Summary: {OUTPUT_CONFIG['output_dir']}/SUMMARY_REPORT.txt")
    print("="*80 + "\n")

    return results


if __name__ == "__main__":
    main()
